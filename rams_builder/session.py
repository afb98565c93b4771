from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from rams_builder.exceptions import AuthenticationError


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str
    display_name: str = ""


class AuthProvider(Protocol):
    """Authentication collaborator. Failures are raised as AuthenticationError."""

    def login(self, email: str, password: str) -> AuthUser:
        ...

    def logout(self) -> None:
        ...


class Session:
    def __init__(self, provider: AuthProvider) -> None:
        self.provider = provider
        self.user: Optional[AuthUser] = None
        self.error_message: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def login(self, email: str, password: str) -> bool:
        email = email.strip()
        if not email or not password:
            self.error_message = "Enter your email and password."
            return False
        try:
            self.user = self.provider.login(email, password)
        except AuthenticationError as exc:
            self.user = None
            self.error_message = str(exc) or "Sign in failed."
            return False
        self.error_message = None
        return True

    def logout(self) -> None:
        try:
            self.provider.logout()
        except AuthenticationError as exc:
            self.error_message = str(exc)
        self.user = None
