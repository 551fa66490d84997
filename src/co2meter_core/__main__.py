"""
Print the effective CO2 meter configuration.

Usage:
    python -m co2meter_core --environment production

Values come from the environment, then `.env`, then the profile for
the selected environment. Database passwords are masked.
"""

import argparse
import os
from typing import List
from urllib.parse import urlsplit, urlunsplit

from co2meter_core.config.environments import Settings, get_settings


def mask_password(url: str) -> str:
    parts = urlsplit(url)
    if not parts.password:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


def describe(config: Settings) -> List[str]:
    bootstrap = (
        f"create schema on startup, {config.DB_CONNECT_RETRIES} attempt(s) "
        f"{config.DB_CONNECT_RETRY_DELAY_SEC:g}s apart"
        if config.DB_BOOTSTRAP_ON_STARTUP
        else "disabled (run `co2meter-server setup-db`)"
    )
    return [
        f"Environment: {config.ENVIRONMENT.value}",
        f"Database: {mask_password(config.DATABASE_URL)}",
        f"Bootstrap: {bootstrap}",
        f"API: http://{config.API_HOST}:{config.API_PORT}/api",
        f"CORS origins: {', '.join(config.CORS_ORIGINS) or '(none)'}",
        f"Log level: {config.LOG_LEVEL}",
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Show CO2 meter configuration")
    parser.add_argument(
        "--environment",
        choices=["production", "development", "testing"],
        help="Profile to resolve (defaults to $CO2METER_ENV)",
    )
    args = parser.parse_args()
    if args.environment:
        os.environ["CO2METER_ENV"] = args.environment

    for line in describe(get_settings()):
        print(line)


if __name__ == "__main__":
    main()
