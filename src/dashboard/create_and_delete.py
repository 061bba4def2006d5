"""CLI script that creates a dashboard on Grafana and deletes it again.

The dashboard model is read from disk, optionally rebound to another
datasource, pushed to Grafana, and removed by the UID Grafana returns once
the operator presses Enter.
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path

from typing import Any

import httpx
from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape

from src.grafana.auth import describe_credential, parse_credential
from src.grafana.client import GrafanaClient, parse_base_url
from src.grafana.datasource import (
    datasource_ref,
    dump_dashboard,
    load_dashboard,
    rewrite_datasource,
)
from src.grafana.errors import GrafanaError, PreconditionFailureError
from src.helpers.config import (
    get_grafana_auth,
    get_grafana_url,
    get_optional_env,
    get_optional_int_env,
)
from src.helpers.constants import (
    DEFAULT_DASHBOARD_FILE,
    DEFAULT_FOLDER_ID,
    DEFAULT_TIMEOUT,
)
from src.helpers.logging import LOG_LEVELS, get_logger, set_log_level


logger = get_logger(__name__, log_color=True)
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


class RunConfig(BaseModel):
    """Configuration for one create/delete run."""

    url: str = Field(..., description="Grafana instance URL")
    credential: str = Field(
        default="", description="API key, username:password, or empty for no auth"
    )
    dashboard_file: Path = Field(
        default=Path(DEFAULT_DASHBOARD_FILE), description="Dashboard JSON model"
    )
    datasource: str | dict[str, str] | None = Field(
        default=None, description="Datasource UID/name or reference to bind to"
    )
    folder_id: int = Field(default=DEFAULT_FOLDER_ID, description="Grafana folder ID")
    folder_uid: str | None = Field(default=None, description="Grafana folder UID")
    message: str = Field(default="", description="Version history message")
    overwrite: bool = Field(default=True, description="Overwrite existing dashboard")
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="HTTP timeout (s)")
    wait: bool = Field(default=True, description="Wait for Enter before deleting")


def get_run_config(
    *,
    url: str | None = None,
    credential: str | None = None,
    dashboard_file: str | None = None,
    datasource: str | None = None,
    datasource_type: str | None = None,
    folder_id: int | None = None,
    folder_uid: str | None = None,
    message: str = "",
    overwrite: bool = True,
    timeout: float = DEFAULT_TIMEOUT,
    wait: bool = True,
) -> RunConfig:
    """Resolve run configuration from arguments, then environment, then defaults.

    Raises:
        ValueError: If an integer environment variable is malformed
    """
    datasource_uid = datasource or get_optional_env("GRAFANA_DATASOURCE")
    datasource_kind = datasource_type or get_optional_env("GRAFANA_DATASOURCE_TYPE")

    if folder_id is None:
        folder_id = get_optional_int_env("GRAFANA_FOLDER_ID", DEFAULT_FOLDER_ID)

    return RunConfig(
        url=get_grafana_url(url),
        credential=get_grafana_auth(credential),
        dashboard_file=Path(
            dashboard_file
            or get_optional_env("GRAFANA_DASHBOARD_FILE", DEFAULT_DASHBOARD_FILE)
            or DEFAULT_DASHBOARD_FILE
        ),
        datasource=(
            datasource_ref(datasource_uid, datasource_kind) if datasource_uid else None
        ),
        folder_id=folder_id if folder_id is not None else DEFAULT_FOLDER_ID,
        folder_uid=folder_uid or get_optional_env("GRAFANA_FOLDER_UID") or None,
        message=message,
        overwrite=overwrite,
        timeout=timeout,
        wait=wait,
    )


def load_model(config: RunConfig) -> dict[str, Any]:
    """Read the dashboard model, rebinding its datasources when configured.

    Raises:
        OSError: If the dashboard file cannot be read
        ParseError: If the file is not a JSON object
    """
    raw = config.dashboard_file.read_bytes()
    logger.info("Loaded dashboard model from %s", config.dashboard_file)

    if config.datasource is not None:
        return load_dashboard(rewrite_datasource(raw, config.datasource))
    return load_dashboard(raw)


def wait_for_keypress() -> None:
    """Block until the operator presses Enter (or stdin is closed).

    Raises:
        KeyboardInterrupt: If the operator presses Ctrl-C at the prompt
    """
    # asyncio.run turns SIGINT into task cancellation, which a blocking read
    # never observes.
    previous = signal.signal(signal.SIGINT, signal.default_int_handler)
    try:
        console.input("\nPress Enter to delete the dashboard...")
    except EOFError:
        logger.debug("stdin closed, continuing")
    finally:
        signal.signal(signal.SIGINT, previous)


def report_orphan(uid: str) -> None:
    """Tell the operator which dashboard was left behind."""
    err_console.print(
        f"Dashboard {escape(uid)} was created but not deleted; remove it manually"
    )


def print_dry_run(config: RunConfig, dashboard: dict[str, Any]) -> None:
    """Show what would be sent without contacting Grafana."""
    base_url = parse_base_url(config.url)
    credential = parse_credential(config.credential)

    console.print("\n=== DRY RUN MODE ===")
    console.print(f"Would create dashboard at: {escape(str(base_url))}")
    console.print(f"Dashboard title: {escape(str(dashboard.get('title')))}")
    console.print(f"Auth: {escape(describe_credential(credential))}")
    console.print(f"Folder: {escape(str(config.folder_uid or config.folder_id))}")
    console.print(f"\nPayload size: {len(dump_dashboard(dashboard))} bytes")


async def create_and_delete(
    config: RunConfig,
    dashboard: dict[str, Any],
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Create the dashboard, wait, then delete it by the returned UID.

    Raises:
        GrafanaError: On any client, transport or precondition failure
    """
    async with GrafanaClient(
        config.url, config.credential, timeout=config.timeout, transport=transport
    ) as client:
        logger.info("=============== Creating Dashboard ================")
        created = await client.set_dashboard(
            dashboard,
            folder_id=config.folder_id,
            folder_uid=config.folder_uid,
            message=config.message,
            overwrite=config.overwrite,
        )
        console.print(
            f"Dashboard creation status: {escape(created.status or 'unknown')}"
        )
        uid = created.require_uid()
        if created.url:
            console.print(f"URL: {escape(str(client.base_url.join(created.url)))}")

        if config.wait:
            try:
                wait_for_keypress()
            except KeyboardInterrupt:
                report_orphan(uid)
                msg = "Interrupted before deleting the dashboard"
                raise PreconditionFailureError(msg) from None

        logger.info("=============== Deleting Dashboard ================")
        try:
            deleted = await client.delete_dashboard_by_uid(uid)
            deleted.require_success(f"delete dashboard {uid}")
        except GrafanaError:
            report_orphan(uid)
            raise

        logger.info(
            "Dashboard is successfully deleted: %s", deleted.message or deleted.title
        )


async def main(
    config: RunConfig,
    *,
    dry_run: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Main entry point for the create/delete script.

    Args:
        config: Run configuration
        dry_run: If True, only print what would be done
        transport: Optional httpx transport for the Grafana client

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    console.print(f"\n🚀 Dashboard round trip against {escape(config.url)}")

    try:
        dashboard = load_model(config)

        if dry_run:
            print_dry_run(config, dashboard)
            console.print("\n✅ Dry run completed successfully")
            return 0

        await create_and_delete(config, dashboard, transport=transport)

    except OSError as e:
        err_console.print(f"\n❌ Cannot read dashboard file: {escape(str(e))}")
        return 1
    except GrafanaError as e:
        err_console.print(f"\n❌ {type(e).__name__}: {escape(str(e))}")
        return 1

    console.print("\n✅ Dashboard created and deleted")
    return 0


def cli() -> None:
    """Command-line interface entry point."""
    parser = argparse.ArgumentParser(
        description="Create a Grafana dashboard, then delete it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  GRAFANA_URL, GRAFANA_AUTH, GRAFANA_DASHBOARD_FILE, GRAFANA_DATASOURCE,
  GRAFANA_DATASOURCE_TYPE, GRAFANA_FOLDER_ID, GRAFANA_FOLDER_UID

Examples:
  # Basic auth against a local Grafana
  python -m src.dashboard.create_and_delete --auth admin:prom-operator

  # Rebind all panels to a Prometheus datasource
  python -m src.dashboard.create_and_delete --datasource P1809F7CD0C75ACF3 \\
      --datasource-type prometheus

  # Dry run mode
  python -m src.dashboard.create_and_delete --dry-run
        """,
    )

    parser.add_argument("--url", help="Grafana URL (default: GRAFANA_URL)")
    parser.add_argument(
        "--auth",
        help="API key or username:password (default: GRAFANA_AUTH, empty for none)",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="dashboard_file",
        help=f"Dashboard JSON model (default: {DEFAULT_DASHBOARD_FILE})",
    )
    parser.add_argument("--datasource", help="Datasource UID or name to bind to")
    parser.add_argument(
        "--datasource-type",
        help="Datasource plugin type; sends a {type, uid} reference",
    )
    parser.add_argument("--folder-id", type=int, help="Target folder ID")
    parser.add_argument("--folder-uid", help="Target folder UID")
    parser.add_argument("--message", default="", help="Version history message")
    parser.add_argument(
        "--no-overwrite",
        action="store_true",
        help="Fail instead of replacing a dashboard with the same uid/title",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"HTTP timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Delete immediately instead of waiting for Enter",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without contacting Grafana",
    )
    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default=get_optional_env("LOG_LEVEL", "INFO"),
        help="Logging level (default: LOG_LEVEL or INFO)",
    )

    args = parser.parse_args()

    try:
        set_log_level(args.log_level)
        config = get_run_config(
            url=args.url,
            credential=args.auth,
            dashboard_file=args.dashboard_file,
            datasource=args.datasource,
            datasource_type=args.datasource_type,
            folder_id=args.folder_id,
            folder_uid=args.folder_uid,
            message=args.message,
            overwrite=not args.no_overwrite,
            timeout=args.timeout,
            wait=not args.no_wait,
        )
    except ValueError as e:
        err_console.print(f"\n❌ Configuration error: {escape(str(e))}")
        sys.exit(1)

    exit_code = asyncio.run(main(config, dry_run=args.dry_run))
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
