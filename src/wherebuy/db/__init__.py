"""Appwrite clients and utilities."""

from .appwrite import get_account, get_appwrite_client, get_databases, get_session_account

__all__ = ["get_account", "get_appwrite_client", "get_databases", "get_session_account"]
