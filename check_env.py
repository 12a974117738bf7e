#!/usr/bin/env python3
"""Check the .env file used for Appwrite configuration, creating a template when missing."""

from pathlib import Path
import os
import sys

ENV_TEMPLATE = """# Appwrite Configuration (Required)
# Get these from: Appwrite Console -> Your Project -> Settings
WHEREBUY_APPWRITE_ENDPOINT=https://cloud.appwrite.io/v1
WHEREBUY_APPWRITE_PROJECT_ID=your-project-id
# Server API key with Database and Users scopes (Settings -> API Keys)
WHEREBUY_APPWRITE_API_KEY=your-api-key

# Filled in after running wherebuy-init
WHEREBUY_DATABASE_ID=
WHEREBUY_LOCATIONS_COLLECTION_ID=

# WHEREBUY_FRONTEND_ALLOWED_ORIGINS - JSON array or comma-separated
# WHEREBUY_FRONTEND_ALLOWED_ORIGINS=http://localhost:3000,http://127.0.0.1:3000
"""

SECRET_NAMES = ("WHEREBUY_APPWRITE_API_KEY",)


def _mask(line: str) -> str:
    name, _, value = line.partition("=")
    value = value.strip()
    if name.strip() in SECRET_NAMES and len(value) > 20:
        return f"{name}={value[:8]}...{value[-4:]}"
    return line


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Wherebuy Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"✅ Created template .env file at: {env_file}")
        print("⚠️  Please edit .env and add your Appwrite endpoint, project ID and API key!")
        return 1

    print(f"✅ Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        print(_mask(line))
    print("-" * 60)
    print()

    sys.path.insert(0, str(project_root / "src"))
    os.chdir(project_root)
    try:
        from wherebuy.config import Settings

        settings = Settings()
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        return 1

    checks = {
        "WHEREBUY_APPWRITE_ENDPOINT": settings.appwrite_endpoint,
        "WHEREBUY_APPWRITE_PROJECT_ID": settings.appwrite_project_id,
        "WHEREBUY_APPWRITE_API_KEY": settings.appwrite_api_key,
        "WHEREBUY_DATABASE_ID": settings.database_id,
        "WHEREBUY_LOCATIONS_COLLECTION_ID": settings.locations_collection_id,
    }
    for name, value in checks.items():
        print(f"{'✅' if value else '❌'} {name}")
    print()

    if not settings.appwrite_configured or not settings.appwrite_api_key:
        print("❌ ERROR: Appwrite is NOT configured")
        print("Make sure variables start with the WHEREBUY_ prefix and restart the backend after editing .env")
        return 1
    if not settings.database_id or not settings.locations_collection_id:
        print("⚠️  Appwrite configured, but the locations collection is not. Run: wherebuy-init")
        return 1
    print("✅ SUCCESS: Wherebuy is configured!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
