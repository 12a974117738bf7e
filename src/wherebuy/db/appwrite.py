"""Appwrite clients for the Python backend."""

import logging
from functools import lru_cache

from appwrite.client import Client
from appwrite.services.account import Account
from appwrite.services.databases import Databases

from ..config import settings


def _base_client() -> Client:
    return Client().set_endpoint(settings.appwrite_endpoint).set_project(settings.appwrite_project_id)


@lru_cache()
def get_appwrite_client() -> Client | None:
    """Get cached server Appwrite client.

    Returns:
        Client authenticated with the server API key if configured, None otherwise.
        Note: This does not test the connection - actual calls may fail with network errors.
    """
    if not settings.appwrite_configured or not settings.appwrite_api_key:
        logging.warning("Appwrite credentials not configured (missing endpoint, project or API key)")
        return None

    return _base_client().set_key(settings.appwrite_api_key)


def get_databases() -> Databases | None:
    client = get_appwrite_client()
    if client is None:
        return None
    return Databases(client)


def get_account() -> Account | None:
    """Account service on the server client, used to create sessions and accounts."""
    client = get_appwrite_client()
    if client is None:
        return None
    return Account(client)


def get_session_account(secret: str) -> Account:
    """Account service acting as the user who owns the session secret."""
    return Account(_base_client().set_session(secret))
