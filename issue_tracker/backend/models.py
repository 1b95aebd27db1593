from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class AuthUser:
    id: str
    email: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AuthUser:
        return cls(id=str(payload["id"]), email=payload.get("email"))


@dataclass
class AuthSession:
    access_token: str
    user: AuthUser
    refresh_token: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AuthSession:
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            user=AuthUser.from_payload(payload["user"]),
        )
