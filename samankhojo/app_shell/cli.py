import argparse
import logging
import sys

from samankhojo.adapters.jobs.festival_expiry import FestivalExpiryScheduler
from samankhojo.adapters.sqlite.migrator import SQLiteMigrator
from samankhojo.api.deps import Settings
from samankhojo.app_shell.config import ConfigError, validate_startup
from samankhojo.app_shell.context import build_festival_service
from samankhojo.rules.loader import load_rules
from samankhojo.rules.models import Rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def get_rules(settings: Settings) -> Rules:
    try:
        rules = load_rules(settings.rules_path)
        validate_startup(rules, settings.data_dir, settings.migrations_dir)
    except (FileNotFoundError, ValueError, ConfigError) as e:
        logger.error("Cannot start: %s", e)
        sys.exit(1)
    return rules


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    get_rules(settings)
    applied = SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
    print(f"Applied {len(applied)} migration(s) to {settings.db_path}.")
    for filename in applied:
        print(f"  {filename}")


def handle_deactivate_expired(settings: Settings, args: argparse.Namespace) -> None:
    rules = get_rules(settings)
    service = build_festival_service(settings.db_path, str(settings.assets_dir), rules)
    result = FestivalExpiryScheduler(service).trigger_now()
    if not result.success:
        logger.error("Expiry pass failed: %s", result.error)
        sys.exit(1)
    print(f"Deactivated {result.deactivated} expired festival(s).")


def handle_serve(settings: Settings, args: argparse.Namespace) -> None:
    import uvicorn

    get_rules(settings)
    uvicorn.run("samankhojo.api.main:app", host=args.host, port=args.port, reload=args.reload)


def main() -> None:
    parser = argparse.ArgumentParser(description="SamanKhojo marketplace CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending SQL migrations")

    # deactivate-expired
    subparsers.add_parser(
        "deactivate-expired", help="Switch off festivals whose end date has passed"
    )

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args()
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings, args)
    elif args.command == "deactivate-expired":
        handle_deactivate_expired(settings, args)
    elif args.command == "serve":
        handle_serve(settings, args)


if __name__ == "__main__":
    main()
