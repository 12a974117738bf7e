"""wherebuy-init: provision the Appwrite locations collection.

Reads everything from the environment (or .env):

    WHEREBUY_APPWRITE_ENDPOINT
    WHEREBUY_APPWRITE_PROJECT_ID
    WHEREBUY_APPWRITE_API_KEY      server key with Database permissions
    WHEREBUY_DATABASE_ID           optional, created when unset
    WHEREBUY_LOCATIONS_COLLECTION_ID  optional, created when unset
"""

from __future__ import annotations

import logging
import sys

from ..config import settings
from ..db.appwrite import get_databases
from ..services.provisioning import provision


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def _missing_settings() -> list[str]:
    required = {
        "WHEREBUY_APPWRITE_ENDPOINT": settings.appwrite_endpoint,
        "WHEREBUY_APPWRITE_PROJECT_ID": settings.appwrite_project_id,
        "WHEREBUY_APPWRITE_API_KEY": settings.appwrite_api_key,
    }
    return [name for name, value in required.items() if not value]


def main() -> int:
    _configure_logging()
    print("Wherebuy Collection Initialization")
    print("=" * 60)

    missing = _missing_settings()
    if missing:
        print("Error: Missing required environment variables", file=sys.stderr)
        print("Please set the following in your .env:", file=sys.stderr)
        for name in missing:
            print(f"  - {name}", file=sys.stderr)
        return 1

    databases = get_databases()
    if databases is None:
        print("Error: Appwrite client could not be created", file=sys.stderr)
        return 1

    report = provision(databases)
    output = sys.stdout if report.ok else sys.stderr
    print(report.render(), file=output)
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
