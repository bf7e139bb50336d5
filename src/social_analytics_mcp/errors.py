"""Error taxonomy and normalization for Graph API failures.

Every failure that leaves a platform client is a ``SocialAnalyticsError``
carrying a ``NormalizedError``. ``normalize()`` turns anything else (httpx
exceptions, local validation errors, bugs) into one.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any

import httpx
from pydantic import ValidationError


class ErrorCode:
    """Closed set of error codes exposed to tool callers."""

    VALIDATION = "VALIDATION"
    OAUTH = "OAUTH"
    RATE_LIMIT = "RATE_LIMIT"
    GRAPH = "GRAPH"
    NETWORK = "NETWORK"
    UNKNOWN = "UNKNOWN"


# Graph API error codes, see developers.facebook.com/docs/graph-api/guides/error-handling
_TOKEN_ERROR_CODE = 190
_PERMISSION_ERROR_CODES = frozenset({10, 200, 299})
_RATE_LIMIT_ERROR_CODES = frozenset({4, 17, 32, 613})
_INVALID_PARAMETER_ERROR_CODE = 100


@dataclass(frozen=True)
class NormalizedError:
    code: str
    message: str
    subcode: str | None = None
    raw: Any = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class SocialAnalyticsError(Exception):
    """Raised by platform clients; ``normalized`` holds the classification."""

    def __init__(self, normalized: NormalizedError):
        super().__init__(normalized.message)
        self.normalized = normalized

    @property
    def code(self) -> str:
        return self.normalized.code

    @property
    def subcode(self) -> str | None:
        return self.normalized.subcode

    @classmethod
    def validation(cls, message: str, raw: Any = None) -> SocialAnalyticsError:
        return cls(NormalizedError(code=ErrorCode.VALIDATION, message=message, raw=raw))

    @classmethod
    def oauth(cls, message: str, subcode: str | None = None) -> SocialAnalyticsError:
        return cls(NormalizedError(code=ErrorCode.OAUTH, message=message, subcode=subcode))


class AccountSelectionRequired(SocialAnalyticsError):
    """Several accounts are reachable and none was chosen.

    ``candidates`` is the discovered account list, passed through unchanged so
    the caller can pick one and retry with an explicit ``account_id``.
    """

    def __init__(self, candidates: list[dict[str, Any]]):
        self.candidates = candidates
        listing = "\n".join(
            f"{idx}. @{acc.get('username', 'Unknown')} ({acc.get('name', 'Unknown')}) - ID: {acc.get('id')}"
            for idx, acc in enumerate(candidates, start=1)
        )
        example = json.dumps({"account_id": candidates[0].get("id") if candidates else ""}, indent=2)
        message = (
            "Multiple Instagram accounts found. Please specify which account to use "
            f"by adding the account_id parameter:\n\n{listing}\n\nExample:\n{example}"
        )
        super().__init__(
            NormalizedError(
                code=ErrorCode.VALIDATION,
                message=message,
                raw={"candidates": candidates},
            )
        )


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except Exception:
        return response.text or None


def _graph_error(body: Any) -> dict[str, Any] | None:
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"]
    return None


def _classify_graph_error(graph_error: dict[str, Any]) -> tuple[str, str | None]:
    code = graph_error.get("code")
    if graph_error.get("type") == "OAuthException" or code == _TOKEN_ERROR_CODE:
        return ErrorCode.OAUTH, "TOKEN"
    if code in _PERMISSION_ERROR_CODES:
        return ErrorCode.OAUTH, "PERMISSION"
    if code in _RATE_LIMIT_ERROR_CODES:
        return ErrorCode.RATE_LIMIT, None
    if code == _INVALID_PARAMETER_ERROR_CODE:
        return ErrorCode.VALIDATION, None
    return ErrorCode.GRAPH, None


def _transport_failure(exc: httpx.HTTPError) -> dict[str, Any]:
    detail: dict[str, Any] = {"type": type(exc).__name__, "message": str(exc)}
    try:
        request = exc.request
    except RuntimeError:
        request = None
    if request is not None:
        detail["request"] = {"method": request.method, "url": str(request.url.copy_remove_param("access_token"))}
    return detail


def normalize(failure: BaseException) -> NormalizedError:
    """Classify *failure* into a ``NormalizedError``. Never raises."""
    try:
        return _normalize(failure)
    except Exception as exc:  # pragma: no cover - last-resort guard
        return NormalizedError(code=ErrorCode.UNKNOWN, message=str(exc) or type(exc).__name__, raw=None)


def _normalize(failure: BaseException) -> NormalizedError:
    if isinstance(failure, SocialAnalyticsError):
        return failure.normalized

    if isinstance(failure, httpx.HTTPStatusError):
        body = _response_body(failure.response)
        graph_error = _graph_error(body)
        if graph_error is None:
            raw = _transport_failure(failure)
            raw["status_code"] = failure.response.status_code
            raw["body"] = body
            return NormalizedError(code=ErrorCode.NETWORK, message=str(failure), raw=raw)
        code, subcode = _classify_graph_error(graph_error)
        return NormalizedError(
            code=code,
            subcode=subcode,
            message=str(graph_error.get("message") or failure),
            raw=body,
        )

    if isinstance(failure, httpx.HTTPError):
        message = str(failure) or type(failure).__name__
        return NormalizedError(code=ErrorCode.NETWORK, message=message, raw=_transport_failure(failure))

    if isinstance(failure, json.JSONDecodeError):
        return NormalizedError(code=ErrorCode.UNKNOWN, message=f"Invalid JSON response: {failure}")

    if isinstance(failure, ValidationError):
        return NormalizedError(code=ErrorCode.VALIDATION, message=str(failure))

    return NormalizedError(code=ErrorCode.UNKNOWN, message=str(failure) or type(failure).__name__)
