from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Type
import requests

from .errors import (
    ApiError,
    BadRequest,
    Conflict,
    Forbidden,
    MalformedResponse,
    NotFound,
    ServerError,
    TransportError,
    Unauthorized,
)

logger = logging.getLogger(__name__)

_STATUS_ERRORS: Dict[int, Type[ApiError]] = {
    400: BadRequest,
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    409: Conflict,
}


def error_for_status(status_code: int) -> Type[ApiError]:
    if status_code >= 500:
        return ServerError
    return _STATUS_ERRORS.get(status_code, ApiError)


class HttpTransport:
    """
    Thin wrapper over a requests session for the drive service.

    Successful JSON payloads are returned with their {"data": ...} envelope
    removed; raw=True (downloads) returns the body bytes untouched. Every
    failure is raised as an ApiError subclass. A 401 first runs
    on_unauthorized so the owner can drop its session.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: int = 30,
        *,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.on_unauthorized = on_unauthorized
        self.session = requests.Session()

    def set_token(self, token: Optional[str]) -> None:
        self.token = token

    def _headers(self, extra: Optional[Dict[str, str]] = None, *, auth: bool = True) -> Dict[str, str]:
        h: Dict[str, str] = {"Accept": "application/json"}
        if auth and self.token:
            h["Authorization"] = f"Bearer {self.token}"
        if extra:
            h.update(extra)
        return h

    @staticmethod
    def unwrap(payload: Any) -> Any:
        """The service wraps most payloads as {"data": ...}; return the inner value."""
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    @staticmethod
    def _server_message(r: requests.Response) -> str:
        if "application/json" in r.headers.get("Content-Type", "") and r.content:
            try:
                payload = r.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                return str(payload.get("message") or payload.get("error") or payload.get("detail") or payload)
        return (r.text or "").strip()

    def _handle_unauthorized(self) -> None:
        logger.warning("[request] session rejected by server; signing out")
        if self.on_unauthorized is not None:
            self.on_unauthorized()

    def _send(self, method: str, url: str, headers: Dict[str, str], **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(method=method, url=url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("[_send] request did not complete; method:%s;url:%s;error:%s", method, url, e)
            raise TransportError(status_code=0, message=str(e), response_text=None) from e

    def _parse(self, r: requests.Response, *, raw: bool) -> Any:
        if not r.content:
            return None
        if raw or "application/json" not in r.headers.get("Content-Type", ""):
            return r.content
        try:
            payload = r.json()
        except ValueError as e:
            logger.error("[_parse] undecodable json body; status:%s;url:%s", r.status_code, r.url)
            raise MalformedResponse(
                status_code=r.status_code,
                message=f"invalid JSON body: {e}",
                response_text=r.text,
            ) from e
        return self.unwrap(payload)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        files: Any = None,
        data: Any = None,
        auth: bool = True,
        raw: bool = False,
    ) -> Any:
        if not path.startswith("/"):
            path = f"/{path}"

        r = self._send(
            method,
            f"{self.base_url}{path}",
            self._headers(headers, auth=auth),
            params=params,
            json=json,
            files=files,
            data=data,
        )

        if 200 <= r.status_code < 300:
            return self._parse(r, raw=raw)

        if r.status_code == 401:
            self._handle_unauthorized()

        server_msg = self._server_message(r)
        raise error_for_status(r.status_code)(
            status_code=r.status_code,
            message=f"{method} {path} failed" + (f": {server_msg}" if server_msg else ""),
            response_text=r.text,
        )
