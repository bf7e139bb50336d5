"""Shared plumbing for the Instagram and Facebook Graph API clients."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..errors import SocialAnalyticsError
from ..executor import ParamValue, RequestExecutor, RequestSpec


class GraphClient:
    """Base facade: resolves credentials/versions and delegates to the executor."""

    platform = "graph"
    default_api_version = "v22.0"
    token_hint = "access token"

    def __init__(
        self,
        executor: RequestExecutor,
        access_token: str | None = None,
        api_version: str | None = None,
    ):
        self.executor = executor
        self.access_token = access_token
        self.api_version = api_version or self.default_api_version

    def resolve_api_version(self, override: str | None = None) -> str:
        return override or self.api_version

    def resolve_access_token(self, override: str | None = None) -> str:
        token = override or self.access_token
        if not token:
            raise SocialAnalyticsError.oauth(f"{self.token_hint} is required")
        return token

    @staticmethod
    def build_path(version: str, path: str) -> str:
        return f"/{version}/{path.lstrip('/')}"

    async def get(
        self,
        path: str,
        params: Mapping[str, ParamValue | None] | None = None,
        *,
        access_token: str | None = None,
        api_version: str | None = None,
    ) -> Any:
        """GET ``path`` with None-valued params dropped."""
        token = self.resolve_access_token(access_token)
        spec = RequestSpec(
            path=self.build_path(self.resolve_api_version(api_version), path),
            params={k: v for k, v in (params or {}).items() if v is not None},
            access_token=token,
        )
        return await self.executor.execute(spec)


def require(value: Any, name: str) -> None:
    if not value:
        raise SocialAnalyticsError.validation(f"{name} is required")


def require_metrics(metrics: Sequence[str] | None, label: str = "metric") -> list[str]:
    cleaned = [m for m in (metrics or []) if m]
    if not cleaned:
        raise SocialAnalyticsError.validation(f"At least one {label} is required")
    return cleaned


def cursor_params(after: str | None, before: str | None) -> dict[str, str | None]:
    return {"after": after, "before": before}
