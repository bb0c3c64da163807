"""Command Line Interface for SharePoint Uploader (spupload)."""

import os
import sys
import argparse
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

from spupload.core.config import (
    CHUNK_ALIGNMENT,
    CHUNK_SIZE,
    CONFLICT_BEHAVIORS,
    DEFAULT_CONFLICT_BEHAVIOR,
    DEFAULT_FILE_PATH,
    REQUIRED_ENV_VARS,
    Settings,
    missing_environment,
)
from spupload.core.auth import SharePointAuth
from spupload.core.client import SharePointClient
from spupload.services.upload import SharePointUploader
from spupload.exceptions import (
    ConfigError,
    LocalFileError,
    SiteLookupError,
    UploaderError,
)
from spupload.utils.helpers import format_size, validate_path_exists

console = Console()

STAGE_LABELS = {
    "config": "Error reading configuration",
    "auth": "Error getting access token",
    "lookup": "Error getting site ID",
    "upload": "Error uploading file",
    "file": "Error reading local file",
}


def display_header():
    """Display the application header."""
    console.print("\n")
    console.print(
        Panel(
            "[bold blue]SharePoint Uploader (spupload)[/bold blue]\n"
            "[dim]Chunked uploads to SharePoint document libraries via app-only authentication[/dim]",
            border_style="blue",
            padding=(1, 2),
        )
    )


def report_error(error):
    """Print a single diagnostic line naming the failing stage."""
    label = STAGE_LABELS.get(error.stage, "Error")
    console.print(
        f"❌ [bold red]{label}:[/bold red] [red]{escape(str(error))}[/red]",
        soft_wrap=True,
    )
    if isinstance(error, SiteLookupError) and error.body:
        console.print(
            f"[dim]Error response body: {escape(error.body)}[/dim]", soft_wrap=True
        )


def run_preflight_checks(file_path, environ=None):
    """Run pre-flight checks.

    Returns:
        0 when the upload can start, otherwise the exit code to stop with.
    """
    console.print("[bold cyan]🔍 Running Pre-flight Checks...[/bold cyan]")

    checks_table = Table(show_header=False, box=box.SIMPLE)
    checks_table.add_column("Check", style="white", width=40)
    checks_table.add_column("Status", style="white", width=15)

    missing_vars = missing_environment(environ)
    checks_table.add_row(
        "Environment Variables",
        "✅ [green]PASS[/green]" if not missing_vars else "❌ [red]FAIL[/red]",
    )

    file_ok = validate_path_exists(file_path) == "file"
    checks_table.add_row(
        "Local File",
        "✅ [green]PASS[/green]" if file_ok else "❌ [red]FAIL[/red]",
    )

    console.print(
        Panel(checks_table, title="[bold]🔧 System Checks[/bold]", border_style="cyan")
    )

    if missing_vars:
        console.print("❌ [bold red]ERROR: Missing required environment variables:")
        for var in missing_vars:
            console.print(f"[red]  - {var}")
        return ConfigError.exit_code

    if not file_ok:
        console.print(f"❌ [bold red]ERROR: The file '{escape(file_path)}' does not exist.")
        return LocalFileError.exit_code

    console.print(
        f"[cyan]📄 {escape(file_path)} ({format_size(os.path.getsize(file_path))})"
    )
    return 0


def run(
    settings,
    file_path=DEFAULT_FILE_PATH,
    chunk_size=CHUNK_SIZE,
    conflict_behavior=DEFAULT_CONFLICT_BEHAVIOR,
    debug=False,
):
    """Run token -> site lookup -> upload, stopping at the first failure.

    Returns:
        0 on success, otherwise the exit code of the error that stopped the run.
    """
    try:
        auth = SharePointAuth(
            settings.client_id,
            settings.client_secret,
            settings.tenant_id,
            debug=debug,
        )
        access_token = auth.get_access_token()

        client = SharePointClient()
        site_id = client.resolve_site_id(
            access_token, settings.hostname, settings.site_path
        )
        if debug:
            console.print(f"[dim]🌐 Site ID: {site_id}[/dim]", soft_wrap=True)

        uploader = SharePointUploader(
            client, chunk_size=chunk_size, conflict_behavior=conflict_behavior
        )
        uploader.upload_file(
            access_token, site_id, settings.document_library, file_path
        )
    except UploaderError as e:
        report_error(e)
        return e.exit_code

    return 0


def chunk_size_type(value):
    """argparse type for --chunk-size: a positive multiple of 320 KiB."""
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid chunk size: {value!r}")
    if size <= 0 or size % CHUNK_ALIGNMENT:
        raise argparse.ArgumentTypeError(
            f"chunk size must be a positive multiple of {CHUNK_ALIGNMENT} bytes"
        )
    return size


class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with the configuration code."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(ConfigError.exit_code, f"{self.prog}: error: {message}\n")


def create_argument_parser():
    """Create and configure the argument parser."""
    parser = UsageArgumentParser(
        prog="spupload",
        description="SharePoint Uploader (spupload) - Upload a file to a SharePoint document library using a resumable upload session.",
        epilog=f"""
        This tool uses the client credentials flow. Ensure that the required
        environment variables ({', '.join(REQUIRED_ENV_VARS)}) are set before running.
        The application must be granted the 'Sites.ReadWrite.All' Application
        Permission in Azure AD and have received admin consent.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "file_path",
        nargs="?",
        default=DEFAULT_FILE_PATH,
        help=f"The local file to upload. Default is '{DEFAULT_FILE_PATH}'.",
    )
    parser.add_argument(
        "-c",
        "--chunk-size",
        type=chunk_size_type,
        default=CHUNK_SIZE,
        help=f"The upload chunk size in bytes, a multiple of {CHUNK_ALIGNMENT}. Default is {CHUNK_SIZE} bytes.",
    )
    parser.add_argument(
        "--conflict-behavior",
        choices=CONFLICT_BEHAVIORS,
        default=DEFAULT_CONFLICT_BEHAVIOR,
        help=f"What to do when the file already exists. Default is '{DEFAULT_CONFLICT_BEHAVIOR}'.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the access token and site ID. Never use in shared logs.",
    )
    parser.add_argument(
        "--skip-preflight", action="store_true", help="Skip the pre-flight checks."
    )
    return parser


def main(argv=None):
    """Main function to handle command-line arguments and run the upload."""
    display_header()

    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.skip_preflight:
        preflight_status = run_preflight_checks(args.file_path)
        if preflight_status:
            sys.exit(preflight_status)

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        report_error(e)
        sys.exit(e.exit_code)

    sys.exit(
        run(
            settings,
            file_path=args.file_path,
            chunk_size=args.chunk_size,
            conflict_behavior=args.conflict_behavior,
            debug=args.debug,
        )
    )


if __name__ == "__main__":
    main()
