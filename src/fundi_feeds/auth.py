"""
Authentication session consulted before any feed request.

Token storage belongs to the host application; this module only holds the
current token in memory and answers whether requests may be issued.
"""

from dataclasses import dataclass


@dataclass
class AuthSession:
    """
    The caller's authentication state.

    Attributes:
        token: Bearer token, or None when logged out.
    """

    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def login(self, token: str) -> None:
        self.token = token

    def logout(self) -> None:
        self.token = None

    def headers(self) -> dict[str, str]:
        """Authorization header for the current token, if any."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


def login_required_message(label: str) -> str:
    """Message shown instead of a feed when nobody is logged in."""
    return f"Please log in to view {label}"
