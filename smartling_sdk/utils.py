"""
Utility functions for Smartling SDK.

This module provides the request-path builder shared by both clients,
response normalization helpers and small file helpers.
"""

import os
import json
import math
import logging
import mimetypes
import stat as stat_module
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from pathlib import Path
from urllib.parse import quote_plus, urlencode, urljoin, parse_qsl, urlsplit

from .exceptions import ApiLogicError, FileAccessError
from .models import ClientConfig, Operation, ResponseEnvelope

logger = logging.getLogger(__name__)

SMARTLING_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def merge_dicts(*dicts: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Merge multiple dictionaries, with later ones taking precedence.

    Args:
        *dicts: Dictionaries to merge, ``None`` entries are skipped

    Returns:
        Merged dictionary
    """
    result = {}
    for d in dicts:
        if d:
            result.update(d)
    return result


def format_query_value(value: Any) -> str:
    """Render a scalar parameter the way the Smartling API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.strftime(SMARTLING_DATE_FORMAT)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def flatten_params(params: Mapping[str, Any], prefix: str = "") -> List[Tuple[str, str]]:
    """
    Flatten request parameters into query pairs.

    Nested mappings become dotted keys (``smartling.placeholder_format``),
    sequences repeat their key and ``None`` values are dropped.
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        name = f"{prefix}{key}"
        if value is None:
            continue
        if isinstance(value, Mapping):
            pairs.extend(flatten_params(value, prefix=f"{name}."))
        elif isinstance(value, (list, tuple, set, frozenset)):
            pairs.extend((name, format_query_value(item)) for item in value if item is not None)
        else:
            pairs.append((name, format_query_value(value)))
    return pairs


def build_request_url(
    config: ClientConfig,
    operation: Union[Operation, str],
    extra_params: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Return the fully-qualified URL for a Smartling API operation.

    Args:
        config: Client configuration providing base URL and credentials
        operation: An ``Operation`` member or a raw API path
        extra_params: Operation parameters, merged over the credentials

    Returns:
        URL with every parameter encoded in the query string
    """
    # apiKey and projectId are always required, callers may still override them
    params = merge_dicts(
        {"apiKey": config.api_key, "projectId": config.project_id},
        extra_params,
    )

    path = operation.path if isinstance(operation, Operation) else operation
    request_url = urljoin(config.base_url, path)
    return f"{request_url}?{urlencode(flatten_params(params))}"


def parse_request_url(url: str) -> Dict[str, Union[str, List[str]]]:
    """Parse a request URL query back into a dict; repeated keys become lists."""
    result: Dict[str, Union[str, List[str]]] = {}
    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if key in result:
            existing = result[key]
            result[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            result[key] = value
    return result


def mask_api_key(url: str, api_key: str) -> str:
    """Hide the API key in a URL before it reaches a log line."""
    if not api_key:
        return url
    masked = f"{api_key[:4]}***"
    # the query holds the urlencoded form of the key
    return url.replace(quote_plus(api_key), masked).replace(api_key, masked)


def decode_body(content: Optional[bytes]) -> Any:
    """
    Decode a raw response body.

    JSON bodies are parsed and UTF-8 text (translated .properties files,
    plain text) is returned as ``str``. Anything else, such as a docx or
    idml download, is returned as the original ``bytes``.
    """
    if content is None:
        return None
    try:
        return json.loads(content)
    except ValueError:
        pass
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content


def unwrap_envelope(body: Any, full_response: bool = False) -> Any:
    """
    Check the envelope code of a decoded body.

    Args:
        body: Decoded response body
        full_response: Return the whole ``response`` object instead of ``data``

    Returns:
        ``response.data`` or ``response``

    Raises:
        ApiLogicError: If the code is not SUCCESS, carrying the full body
    """
    envelope = ResponseEnvelope.from_body(body)
    if not envelope.is_success:
        logger.warning("Smartling API returned %s: %s", envelope.code, envelope.messages)
        raise ApiLogicError(body)

    return envelope.raw if full_response else envelope.data


def extract_upload_data(body: Any) -> Any:
    """
    Return ``response.data`` from an upload body without checking its code.

    The upload endpoint has always been treated as successful on any 200
    reply; existing callers depend on it.
    """
    return ResponseEnvelope.from_body(body).data


def stat_local_file(file_path: Union[str, Path]) -> os.stat_result:
    """
    Stat a local file ahead of an upload.

    Raises:
        FileAccessError: If the path is missing, unreadable or not a file
    """
    try:
        file_stat = os.stat(file_path)
    except OSError as e:
        raise FileAccessError(f"Cannot access {file_path}: {e.strerror or e}", file_path=str(file_path), original=e) from e

    if not stat_module.S_ISREG(file_stat.st_mode):
        err = IsADirectoryError(f"{file_path} is not a regular file")
        raise FileAccessError(str(err), file_path=str(file_path), original=err)

    return file_stat


def guess_mime_type(filename: str) -> str:
    """Guess MIME type for a file name, defaulting to octet-stream."""
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or "application/octet-stream"


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB", "PB"]
    i = int(math.floor(math.log(size_bytes, 1024)))

    if i >= len(size_names):
        i = len(size_names) - 1

    p = math.pow(1024, i)
    size = round(size_bytes / p, 2)

    return f"{size} {size_names[i]}"
