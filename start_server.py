#!/usr/bin/env python3
"""Start the Wherebuy API with uvicorn, honoring PORT and HOST from the environment."""

import os
import subprocess
import sys

port = os.environ.get("PORT", "8000")
try:
    port_int = int(port)
except ValueError:
    print(f"Warning: Invalid PORT value '{port}', using default 8000", file=sys.stderr)
    port_int = 8000
host = os.environ.get("HOST", "0.0.0.0")

# Make src/ importable both here and in the uvicorn child process
src_path = os.path.abspath("src")
if not os.path.isdir(src_path):
    print(f"Warning: src directory not found at {src_path}", file=sys.stderr)
    src_path = os.getcwd()
sys.path.insert(0, src_path)
pythonpath = os.environ.get("PYTHONPATH", "")
os.environ["PYTHONPATH"] = f"{src_path}{os.pathsep}{pythonpath}" if pythonpath else src_path

# Fail fast on configuration or import errors before handing over to uvicorn
try:
    from wherebuy.config import settings
    import wherebuy.main  # noqa: F401
except Exception as e:
    print(f"❌ Failed to import wherebuy.main: {type(e).__name__}: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc(file=sys.stderr)
    sys.exit(1)

if not settings.appwrite_configured:
    print("⚠️  Appwrite is not configured; run check_env.py", file=sys.stderr)
elif not settings.database_id or not settings.locations_collection_id:
    print("⚠️  Locations collection IDs missing; run wherebuy-init", file=sys.stderr)

cmd = [
    sys.executable,
    "-m",
    "uvicorn",
    "wherebuy.main:app",
    "--host",
    host,
    "--port",
    str(port_int),
    "--proxy-headers",
    "--forwarded-allow-ips", "*",
]

print(f"🚀 Starting Wherebuy API on {host}:{port_int}...", file=sys.stderr)
try:
    result = subprocess.call(cmd)
    if result != 0:
        print(f"❌ Uvicorn exited with code {result}", file=sys.stderr)
    sys.exit(result)
except KeyboardInterrupt:
    print("⚠️ Server interrupted by user", file=sys.stderr)
    sys.exit(0)
