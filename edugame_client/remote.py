from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence

import httpx

logger = logging.getLogger("edugame_client.remote")


# -------------------------
# Result-or-failure values
# -------------------------

class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"
    NETWORK = "network"
    SERVER = "server"


@dataclass(frozen=True)
class RemoteFailure:
    kind: FailureKind
    detail: str
    status_code: Optional[int] = None


@dataclass(frozen=True)
class RemoteResult:
    data: Any = None
    failure: Optional[RemoteFailure] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, data: Any = None, status_code: int = 200) -> "RemoteResult":
        return cls(data=data, status_code=status_code)

    @classmethod
    def failed(cls, kind: FailureKind, detail: str, status_code: Optional[int] = None) -> "RemoteResult":
        return cls(failure=RemoteFailure(kind=kind, detail=detail, status_code=status_code), status_code=status_code)


def failure_kind_for_status(status_code: int) -> FailureKind:
    if status_code == 404:
        return FailureKind.NOT_FOUND
    if status_code in (401, 403):
        return FailureKind.UNAUTHORIZED
    if status_code in (400, 422):
        return FailureKind.VALIDATION
    return FailureKind.SERVER


class RemoteMutationClient(ABC):
    """Boundary to the remote authority.

    Every call settles to a :class:`RemoteResult`; implementations never
    retry and never raise for remote-side failures.
    """

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Mapping[str, Any]] = None,
        params: Optional[Sequence[tuple[str, str]]] = None,
        form: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> RemoteResult:
        raise NotImplementedError


# -------------------------
# HTTP transport
# -------------------------

# A 401 on these endpoints is an ordinary failure, not a lost session.
PUBLIC_ENDPOINT_MARKERS = (
    "/check",
    "/play/public",
    "/leaderboard",
    "/api/game",
    "/template",
)


def _is_public(path: str) -> bool:
    return any(marker in path for marker in PUBLIC_ENDPOINT_MARKERS)


def _error_detail(payload: Any, resp: httpx.Response) -> str:
    if isinstance(payload, dict):
        detail = payload.get("message") or payload.get("detail")
        if detail:
            return str(detail)
    elif isinstance(payload, str) and payload.strip():
        return payload.strip()
    return resp.reason_phrase or f"HTTP {resp.status_code}"


class HttpRemoteClient(RemoteMutationClient):
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        on_unauthorized: Optional[Callable[[str], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token_provider = token_provider
        self._on_unauthorized = on_unauthorized
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Mapping[str, Any]] = None,
        params: Optional[Sequence[tuple[str, str]]] = None,
        form: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> RemoteResult:
        url = f"{self.base_url}{path}"
        kwargs: dict[str, Any] = {
            "method": method,
            "url": url,
            "headers": self._headers(),
        }
        if params:
            kwargs["params"] = list(params)
        if json_body is not None:
            kwargs["json"] = dict(json_body)
        elif form is not None:
            kwargs["data"] = dict(form)

        try:
            async with httpx.AsyncClient(
                timeout=timeout or self.timeout,
                transport=self._transport,
                follow_redirects=False,
            ) as client:
                resp = await client.request(**kwargs)
        except httpx.TimeoutException:
            logger.error("Timeout calling %s %s", method, url)
            return RemoteResult.failed(FailureKind.NETWORK, "Request timed out")
        except httpx.RequestError as e:
            logger.error("Error calling %s %s (%s)", method, url, e)
            return RemoteResult.failed(FailureKind.NETWORK, "Service unavailable")

        return self._to_result(method, path, resp)

    def _to_result(self, method: str, path: str, resp: httpx.Response) -> RemoteResult:
        payload: Any = None
        decoded = True
        if resp.content:
            try:
                payload = resp.json()
            except ValueError:
                payload = resp.text
                decoded = False

        if resp.status_code >= 400:
            detail = _error_detail(payload, resp)
            logger.error("%s %s failed with %s: %s", method, path, resp.status_code, detail)
            if resp.status_code == 401 and not _is_public(path) and self._on_unauthorized:
                self._on_unauthorized(path)
            return RemoteResult.failed(failure_kind_for_status(resp.status_code), detail, resp.status_code)

        if not decoded:
            logger.error("%s %s returned a non-JSON body", method, path)
            return RemoteResult.failed(FailureKind.SERVER, "Invalid response body", resp.status_code)

        if isinstance(payload, dict) and "data" in payload:
            payload = payload["data"]
        return RemoteResult.success(payload, resp.status_code)
