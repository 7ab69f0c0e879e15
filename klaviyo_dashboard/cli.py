"""
Command line administration for the Klaviyo Metrics Dashboard.

Usage:
    klaviyo-dashboard init-db
    klaviyo-dashboard add-client "Acme" ops@acme.com s3cret pk_0123456789abcdef0123
    klaviyo-dashboard add-admin admin@agency.com s3cret
    klaviyo-dashboard list-clients
    klaviyo-dashboard render-dashboard ops@acme.com --simple --output acme.html
    klaviyo-dashboard serve --port 3001
"""

import argparse
import asyncio
import sqlite3
import sys
from pathlib import Path

from klaviyo_dashboard.collectors import collect_metrics
from klaviyo_dashboard.core import ConfigurationError, get_config, get_logger, setup_logging
from klaviyo_dashboard.dashboards import render_detailed_dashboard, render_simple_dashboard
from klaviyo_dashboard.security import ValidationError
from klaviyo_dashboard.storage import (
    AdminRepository,
    ClientNotFoundError,
    ClientRepository,
    DuplicateEmailError,
    init_database,
)

logger = get_logger(__name__)


def cmd_init_db(args: argparse.Namespace) -> int:
    path = init_database()
    print(f"Database ready: {path}")
    return 0


def cmd_add_client(args: argparse.Namespace) -> int:
    init_database()
    client = ClientRepository().create(args.name, args.email, args.password, args.klaviyo_key)
    print(f"Client created: id={client.id} name={client.name} email={client.email}")
    return 0


def cmd_add_admin(args: argparse.Namespace) -> int:
    init_database()
    admin_id = AdminRepository().create(args.email, args.password)
    print(f"Admin created: id={admin_id} email={args.email.strip().lower()}")
    return 0


def cmd_list_clients(args: argparse.Namespace) -> int:
    init_database()
    clients = ClientRepository().list_clients()
    if not clients:
        print("No clients registered")
        return 0

    for client in clients:
        print(f"{client.id:>5}  {client.name:<30}  {client.email:<40}  {client.created_at or ''}")
    return 0


def cmd_render_dashboard(args: argparse.Namespace) -> int:
    init_database()
    repository = ClientRepository()
    client = repository.get_by_email(args.email)
    if client is None:
        raise ClientNotFoundError(f"No client with email {args.email}")

    api_key = repository.get_api_key(client.id)
    output_path = Path(args.output) if args.output else Path(f"{client.email.split('@')[0]}_dashboard.html")

    if args.simple:
        summary = asyncio.run(collect_metrics(api_key, "simple"))
        render_simple_dashboard(client.name, summary, output_path=output_path)
    else:
        metrics = asyncio.run(collect_metrics(api_key, "all"))
        render_detailed_dashboard(client.name, metrics, output_path=output_path)

    print(f"Dashboard written: {output_path.resolve()}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    server_config = get_config().get_server_config()
    uvicorn.run(
        "klaviyo_dashboard.api.app:app",
        host=args.host or server_config.host,
        port=args.port or server_config.port,
        reload=args.reload,
        log_level=server_config.log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="klaviyo-dashboard", description="Klaviyo Metrics Dashboard administration")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_db = subparsers.add_parser("init-db", help="Create the database tables")
    init_db.set_defaults(handler=cmd_init_db)

    add_client = subparsers.add_parser("add-client", help="Register a client")
    add_client.add_argument("name")
    add_client.add_argument("email")
    add_client.add_argument("password")
    add_client.add_argument("klaviyo_key", help="Klaviyo private API key (pk_...)")
    add_client.set_defaults(handler=cmd_add_client)

    add_admin = subparsers.add_parser("add-admin", help="Register an admin")
    add_admin.add_argument("email")
    add_admin.add_argument("password")
    add_admin.set_defaults(handler=cmd_add_admin)

    list_clients = subparsers.add_parser("list-clients", help="List registered clients")
    list_clients.set_defaults(handler=cmd_list_clients)

    render = subparsers.add_parser("render-dashboard", help="Fetch live metrics and write an HTML dashboard")
    render.add_argument("email", help="Client email")
    render.add_argument("--simple", action="store_true", help="Render the simple (headline) view")
    render.add_argument("--output", type=str, help="Output HTML path (default: <name>_dashboard.html)")
    render.set_defaults(handler=cmd_render_dashboard)

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    serve.set_defaults(handler=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``klaviyo-dashboard`` console script."""
    args = build_parser().parse_args(argv)
    if args.log_level:
        setup_logging(level=args.log_level)

    try:
        return int(args.handler(args))
    except DuplicateEmailError as e:
        logger.error("Email already registered", extra={"email": e.email})
        print(f"[ERROR] {e}", file=sys.stderr)
    except (ClientNotFoundError, ValidationError, ConfigurationError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"[ERROR] {e}", file=sys.stderr)
    except sqlite3.Error as e:
        logger.error(f"{args.command} failed: database error: {e}", extra={"exception_class": e.__class__.__name__})
        print(f"[ERROR] Database error: {e}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
