from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..transport.http import HttpTransport
from ..transport.errors import Unauthorized


@dataclass(frozen=True)
class SignInResponse:
    token: str
    user_id: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "SignInResponse":
        user = obj.get("user") or {}
        return cls(
            token=obj["token"],
            user_id=user.get("id"),
            email=user.get("email"),
        )


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str
    created_at: Optional[str] = None
    storage_used: Optional[int] = None
    storage_quota: Optional[int] = None

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "AuthUser":
        storage = obj.get("storage") or {}
        return cls(
            id=obj["id"],
            email=obj["email"],
            created_at=obj.get("createdAt"),
            storage_used=storage.get("used"),
            storage_quota=storage.get("quota"),
        )


class AuthAPI:
    def __init__(self, http: HttpTransport):
        self._http = http

    def sign_in(self, email: str, password: str) -> SignInResponse:
        payload = {"email": email, "password": password}
        data = self._http.request(
            "POST",
            "/auth/signin",
            json=payload,
            auth=False,  # no Authorization header
        )
        return SignInResponse.from_json(data)

    def sign_out(self) -> None:
        self._http.request("POST", "/auth/signout")

    def me(self) -> Optional[AuthUser]:
        """Current user, or None when the session is not valid."""
        try:
            data = self._http.request("GET", "/auth/me")
        except Unauthorized:
            return None
        return AuthUser.from_json(data) if data else None
