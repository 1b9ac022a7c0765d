"""
Command-line interface for Smartling SDK.

This module provides a CLI tool to upload, download and manage files in a
Smartling project from the command line.
"""

import os
import sys
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from .client import SmartlingClient
from .models import ApiBaseUrl, ClientConfig, FileCondition, RetrievalType
from .exceptions import ApiLogicError, ConfigurationError, SmartlingError


# Initialize Rich console
console = Console()

ENVIRONMENTS = {
    "live": ApiBaseUrl.LIVE.value,
    "sandbox": ApiBaseUrl.SANDBOX.value,
}


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # keep HTTP library noise out unless debugging
    logging.getLogger("urllib3").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.DEBUG if verbose else logging.WARNING)


class CLIContext:
    """CLI context object to share state between commands."""

    def __init__(self):
        self.client: Optional[SmartlingClient] = None
        self.config: Dict[str, Any] = {}
        self.config_file = Path.home() / ".smartling" / "config.json"
        self.base_url_override: Optional[str] = None

    def load_config(self):
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    self.config = json.load(f)
            except (json.JSONDecodeError, IOError):
                self.config = {}

    def save_config(self):
        """Save configuration to file."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=2)
        self.config_file.chmod(0o600)

    def get_client_config(self) -> ClientConfig:
        """Resolve credentials from the config file, then the environment."""
        api_key = self.config.get('api_key') or os.getenv('SMARTLING_API_KEY')
        project_id = self.config.get('project_id') or os.getenv('SMARTLING_PROJECT_ID')
        base_url = (
            self.base_url_override
            or self.config.get('base_url')
            or os.getenv('SMARTLING_API_BASE_URL')
            or ApiBaseUrl.LIVE.value
        )

        if not api_key or not project_id:
            raise ConfigurationError(
                "API key and project ID are not configured. Use 'smartling config' or set "
                "SMARTLING_API_KEY and SMARTLING_PROJECT_ID environment variables."
            )

        return ClientConfig(base_url=base_url, api_key=api_key, project_id=project_id)

    def get_client(self) -> SmartlingClient:
        """Get authenticated client."""
        if self.client is None:
            self.client = SmartlingClient(config=self.get_client_config())

        return self.client


# Create CLI context
cli_context = CLIContext()


def fail(action: str, error: SmartlingError):
    """Print a failure and exit with status 1."""
    console.print(f"❌ {action} failed: {escape(str(error))}")
    if isinstance(error, ApiLogicError) and error.messages:
        for message in error.messages:
            console.print(f"   • {escape(str(message))}")
    sys.exit(1)


def print_json(data: Any):
    console.print_json(json.dumps(data, default=str))


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--env', 'environment', type=click.Choice(sorted(ENVIRONMENTS)), help='Smartling API environment')
@click.option('--base-url', help='Custom Smartling API base URL')
@click.pass_context
def cli(ctx, debug, environment, base_url):
    """Smartling CLI - manage translation files from the command line."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    setup_logging(debug)

    # Load configuration
    cli_context.load_config()
    cli_context.client = None
    cli_context.base_url_override = base_url or (ENVIRONMENTS[environment] if environment else None)


@cli.command()
@click.option('--api-key', prompt=True, hide_input=True, help='Smartling API key')
@click.option('--project-id', prompt=True, help='Smartling project ID')
@click.option('--base-url', default=ApiBaseUrl.LIVE.value, help='Smartling API base URL')
def config(api_key, project_id, base_url):
    """Save Smartling credentials and settings."""

    cli_context.config.update({
        'api_key': api_key,
        'project_id': project_id,
        'base_url': base_url,
    })

    cli_context.save_config()

    console.print(f"✅ Configuration saved to {cli_context.config_file}")


@cli.command()
@click.argument('file_path', type=click.Path())
@click.argument('file_uri')
@click.argument('file_type')
@click.option('--approved', is_flag=True, help='Authorize the content for translation on upload')
@click.option('--callback-url', help='URL called when the file is fully published for a locale')
@click.option('--directive', 'directives', multiple=True, metavar='NAME=VALUE',
              help='Parser directive sent as smartling.NAME (can be used multiple times)')
def upload(file_path, file_uri, file_type, approved, callback_url, directives):
    """Upload FILE_PATH to Smartling as FILE_URI."""

    options: Dict[str, Any] = {'approved': approved}
    if callback_url:
        options['callbackUrl'] = callback_url

    parsed_directives = {}
    for directive in directives:
        name, sep, value = directive.partition('=')
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got '{directive}'", param_hint='--directive')
        parsed_directives[name] = value
    if parsed_directives:
        options['smartling'] = parsed_directives

    try:
        client = cli_context.get_client()
        data = client.upload(file_path, file_uri, file_type, options)
    except SmartlingError as e:
        fail("Upload", e)

    data = data if isinstance(data, dict) else {}
    console.print(Panel(
        f"File URI: {file_uri}\n"
        f"Overwritten: {data.get('overWritten', 'unknown')}\n"
        f"Strings: {data.get('stringCount', 'unknown')}\n"
        f"Words: {data.get('wordCount', 'unknown')}",
        title="✅ Uploaded",
        border_style="green"
    ))


@cli.command()
@click.argument('file_uri')
@click.option('--locale', help='Locale to download; the original is returned when omitted')
@click.option('--retrieval-type', type=click.Choice([t.value for t in RetrievalType]),
              help='Translation stage to return')
@click.option('--include-original-strings/--no-include-original-strings', default=None,
              help='Fall back to original strings (gettext, xml and json files)')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the file here instead of stdout')
def get(file_uri, locale, retrieval_type, include_original_strings, output):
    """Download FILE_URI from Smartling."""

    options = {
        'locale': locale,
        'retrievalType': retrieval_type,
        'includeOriginalStrings': include_original_strings,
    }

    try:
        client = cli_context.get_client()
        body = client.get(file_uri, options)
    except SmartlingError as e:
        fail("Download", e)

    if isinstance(body, bytes):
        if output:
            Path(output).write_bytes(body)
            console.print(f"✅ Downloaded: {output}")
        else:
            click.echo(body, nl=False)
        return

    content = body if isinstance(body, str) else json.dumps(body, indent=2, ensure_ascii=False)

    if output:
        Path(output).write_text(content, encoding='utf-8')
        console.print(f"✅ Downloaded: {output}")
    else:
        click.echo(content)


@cli.command(name='list')
@click.option('--locale', help='Report completion for this locale')
@click.option('--uri-mask', help="SQL LIKE pattern, e.g. '%.properties'")
@click.option('--file-type', 'file_types', multiple=True, help='File type filter (can be used multiple times)')
@click.option('--last-uploaded-after', help='Only files uploaded after this date (YYYY-MM-DDThh:mm:ss)')
@click.option('--last-uploaded-before', help='Only files uploaded before this date (YYYY-MM-DDThh:mm:ss)')
@click.option('--offset', type=int, help='Number of files to skip')
@click.option('--limit', '-l', type=int, help='Maximum number of files to list')
@click.option('--condition', 'conditions', multiple=True, type=click.Choice([c.value for c in FileCondition]),
              help='Status condition (can be used multiple times)')
@click.option('--order-by', help='Sort field, optionally suffixed with _asc or _desc')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
def list_files(locale, uri_mask, file_types, last_uploaded_after, last_uploaded_before,
               offset, limit, conditions, order_by, output_json):
    """List files in the Smartling project."""

    options = {
        'locale': locale,
        'uriMask': uri_mask,
        'fileTypes': list(file_types) or None,
        'lastUploadedAfter': last_uploaded_after,
        'lastUploadedBefore': last_uploaded_before,
        'offset': offset,
        'limit': limit,
        'conditions': list(conditions) or None,
        'orderBy': order_by,
    }

    try:
        client = cli_context.get_client()
        data = client.list(options)
    except SmartlingError as e:
        fail("List", e)

    if output_json:
        print_json(data)
        return

    # data is either {"fileCount": n, "fileList": [...]} or the bare list
    if isinstance(data, dict):
        files = data.get('fileList') or []
        file_count = data.get('fileCount', len(files))
    else:
        files = data or []
        file_count = len(files)
    files = [file for file in files if isinstance(file, dict)]

    if not files:
        console.print("No files found.")
        return

    table = Table(title=f"Files ({file_count})")
    table.add_column("File URI", style="green", no_wrap=True)
    table.add_column("Type", style="blue")
    table.add_column("Strings", style="yellow")
    table.add_column("Approved", style="cyan")
    table.add_column("Completed", style="cyan")
    table.add_column("Last Uploaded", style="magenta")

    for file in files:
        table.add_row(
            str(file.get('fileUri', '')),
            str(file.get('fileType', '')),
            str(file.get('stringCount', '')),
            str(file.get('approvedStringCount', '')),
            str(file.get('completedStringCount', '')),
            str(file.get('lastUploaded', '')),
        )

    console.print(table)


@cli.command()
@click.argument('file_uri')
@click.argument('locale')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
def status(file_uri, locale, output_json):
    """Show translation status of FILE_URI in LOCALE."""

    try:
        client = cli_context.get_client()
        response = client.status(file_uri, locale)
    except SmartlingError as e:
        fail("Status", e)

    if output_json:
        print_json(response)
        return

    table = Table(title=f"Status: {file_uri} ({locale})")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    data = response.get('data') if isinstance(response, dict) else None
    for key, value in (data if isinstance(data, dict) else {}).items():
        table.add_row(key, str(value))

    console.print(table)


@cli.command()
@click.argument('file_uri')
@click.argument('new_file_uri')
def rename(file_uri, new_file_uri):
    """Rename FILE_URI to NEW_FILE_URI."""

    try:
        client = cli_context.get_client()
        client.rename(file_uri, new_file_uri)
    except SmartlingError as e:
        fail("Rename", e)

    console.print(f"✅ Renamed: {file_uri} → {new_file_uri}")


@cli.command()
@click.argument('file_uri')
@click.confirmation_option(prompt='Are you sure you want to delete this file?')
def delete(file_uri):
    """Delete FILE_URI from Smartling."""

    try:
        client = cli_context.get_client()
        client.delete(file_uri)
    except SmartlingError as e:
        fail("Delete", e)

    console.print(f"✅ Delete requested: {file_uri}")
    console.print("[dim]Smartling removes files in the background; the URI stays reserved until it finishes.[/dim]")


if __name__ == '__main__':
    cli()
