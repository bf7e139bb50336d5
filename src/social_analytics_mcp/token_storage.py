"""Credential storage — keychain first via keyring, env vars fallback.

Reads Graph API credentials and defaults per platform from:
1. OS keychain (macOS Keychain, Windows Credential Manager, Linux Secret Service),
   service ``social-analytics-mcp``, one JSON entry per platform
2. Environment variables (INSTAGRAM_ACCESS_TOKEN, FACEBOOK_PAGE_ACCESS_TOKEN, ...)
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import keyring

from .executor import RequestExecutor, build_http_client
from .platforms import FacebookClient, InstagramClient

logger = logging.getLogger(__name__)

SERVICE_NAME = "social-analytics-mcp"

_ENV_VARS: dict[str, dict[str, tuple[str, ...]]] = {
    "instagram": {
        "accessToken": ("INSTAGRAM_ACCESS_TOKEN",),
        "accountId": ("INSTAGRAM_ACCOUNT_ID",),
        "apiVersion": ("INSTAGRAM_API_VERSION",),
    },
    "facebook": {
        "accessToken": ("FACEBOOK_PAGE_ACCESS_TOKEN", "FACEBOOK_ACCESS_TOKEN"),
        "pageId": ("FACEBOOK_PAGE_ID",),
        "apiVersion": ("FACEBOOK_API_VERSION",),
    },
}


def _from_env(platform: str) -> dict[str, Any]:
    creds: dict[str, Any] = {}
    for key, names in _ENV_VARS[platform].items():
        for name in names:
            value = os.environ.get(name)
            if value:
                creds[key] = value
                break
    return creds


def get_credentials(platform: str) -> dict[str, Any] | None:
    """Retrieve credentials for *platform* from the OS keychain, falling back to env vars."""
    if platform not in _ENV_VARS:
        raise ValueError(f"Unknown platform: {platform}")

    try:
        data = keyring.get_password(SERVICE_NAME, platform)
        if data:
            return json.loads(data)
    except Exception as exc:
        logger.debug("Keychain lookup for %s failed: %s", platform, exc)

    creds = _from_env(platform)
    if creds.get("accessToken"):
        return creds
    return None


def _timeout() -> float:
    return float(os.environ.get("GRAPH_TIMEOUT_SECONDS", "30"))


def build_instagram_client() -> InstagramClient:
    """Build an InstagramClient from keychain or env vars.

    A client without a token is still returned; its tools fail with an OAUTH error.
    """
    creds = get_credentials("instagram") or {}
    return InstagramClient(
        RequestExecutor(build_http_client(_timeout())),
        access_token=creds.get("accessToken"),
        account_id=creds.get("accountId"),
        api_version=creds.get("apiVersion"),
    )


def build_facebook_client() -> FacebookClient:
    """Build a FacebookClient from keychain or env vars."""
    creds = get_credentials("facebook") or {}
    return FacebookClient(
        RequestExecutor(build_http_client(_timeout())),
        access_token=creds.get("accessToken"),
        page_id=creds.get("pageId"),
        api_version=creds.get("apiVersion"),
    )
