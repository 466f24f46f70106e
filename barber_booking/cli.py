import argparse
import logging
import sys

from barber_booking import config, migrate, webhook

# --- Logging Setup ---

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool):
    """Configures logging to stderr with local time."""
    import time

    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s]: %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    formatter.converter = time.localtime
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )


def parse_arguments(argv=None):
    """Parses command line arguments."""
    parser = argparse.ArgumentParser(description="Barbershop appointment webhook for Dialogflow.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the webhook HTTP server.")
    serve.add_argument("--host", type=str, default="0.0.0.0", help="Interface to bind. Defaults to 0.0.0.0.")
    serve.add_argument("--port", type=int, default=config.PORT, help="Port to listen on. Defaults to $PORT or 3000.")

    migration = subparsers.add_parser("migrate", help="Copy the flat Firestore collections under a tenant.")
    migration.add_argument("--tenant", type=str, default=config.TENANT_ID, help="Tenant document id. Defaults to 01.")
    migration.add_argument(
        "--collection",
        dest="collections",
        action="append",
        help="Collection to migrate; repeat for several. Defaults to all legacy collections.",
    )
    return parser.parse_args(argv)


def serve(host: str, port: int):
    if not config.validate_environment():
        sys.exit(1)
    logger.info(f"Barbershop webhook listening on port {port}")
    logger.info(f"Configured time zone: {config.TIMEZONE}")
    webhook.create_app().run(host=host, port=port)


def main():
    args = parse_arguments()
    setup_logging(args.verbose)

    if args.command == "serve":
        serve(args.host, args.port)
    elif args.command == "migrate":
        ok = migrate.run_migration(
            tenant_id=args.tenant,
            collections=args.collections or config.LEGACY_COLLECTIONS,
        )
        if not ok:
            sys.exit(1)


if __name__ == "__main__":
    main()
