"""Per-platform Graph API facades."""

from __future__ import annotations

from .facebook import FacebookClient
from .instagram import InstagramClient

__all__ = ["FacebookClient", "InstagramClient"]
