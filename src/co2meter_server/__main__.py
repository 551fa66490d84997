"""
Canonical entry point for co2meter_server package.

Usage:
    co2meter-server api --environment development
    co2meter-server setup-db --environment production
"""

import argparse
import logging
import os
import sys

import uvicorn
from co2meter_core.config.environments import get_settings
from co2meter_core.config.log_setup import setup_logging


def run_api_server(args: argparse.Namespace) -> None:
    """Run the FastAPI server."""
    config = get_settings()
    setup_logging(config)
    log = logging.getLogger(__name__)

    # Override with command line arguments
    host = args.host or config.API_HOST
    port = args.port or config.API_PORT
    reload = args.reload and args.environment != "production"

    log.info("Starting API server...")
    log.info(f"Environment: {args.environment}")
    log.info(f"Host: {host}")
    log.info(f"Port: {port}")
    log.info(f"Reload: {reload}")

    uvicorn.run(
        "co2meter_server.adapters.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=config.LOG_LEVEL.lower(),
    )
    return None


def setup_database(args: argparse.Namespace) -> None:
    """Create the schema, waiting for the database to accept connections."""
    from co2meter_server.adapters.db.bootstrap import ensure_schema
    from co2meter_server.adapters.db.session import engine

    config = get_settings()
    setup_logging(config)
    log = logging.getLogger(__name__)

    log.info(f"Setting up database for {args.environment} environment...")
    ensure_schema(
        engine,
        retries=config.DB_CONNECT_RETRIES,
        delay_sec=config.DB_CONNECT_RETRY_DELAY_SEC,
    )
    log.info("Database setup completed successfully")
    return None


def main() -> None:
    """Main entry point for co2meter_server commands."""
    parser = argparse.ArgumentParser(description="CO2 Meter Server - API and Database Management")
    parser.add_argument(
        "--environment",
        choices=["production", "development", "testing"],
        default="development",
        help="Environment to run in",
    )
    parser.add_argument(
        "command",
        choices=["api", "setup-db"],
        help="Command to run",
    )
    parser.add_argument("--host", help="Host to bind to (overrides config)")
    parser.add_argument("--port", type=int, help="Port to bind to (overrides config)")
    parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload (development only)"
    )

    args = parser.parse_args()

    # Set environment variable for config
    os.environ["CO2METER_ENV"] = args.environment

    if args.command == "api":
        run_api_server(args)
    elif args.command == "setup-db":
        setup_database(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
