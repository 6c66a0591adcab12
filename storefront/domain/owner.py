# storefront/domain/owner.py
from dataclasses import dataclass

# width of the session_id columns
MAX_SESSION_ID_LENGTH = 128


@dataclass(frozen=True)
class UserOwner:
    user_id: int

    def __post_init__(self):
        if not isinstance(self.user_id, int) or self.user_id <= 0:
            raise ValueError(f"Invalid user id: {self.user_id!r}")

    def __str__(self) -> str:
        return f"user:{self.user_id}"


@dataclass(frozen=True)
class GuestOwner:
    session_id: str

    def __post_init__(self):
        if not isinstance(self.session_id, str) or not self.session_id.strip():
            raise ValueError("Guest session id must be a non-empty string")
        if len(self.session_id) > MAX_SESSION_ID_LENGTH:
            raise ValueError(f"Guest session id longer than {MAX_SESSION_ID_LENGTH} characters")

    def __str__(self) -> str:
        return f"guest:{self.session_id}"


Owner = UserOwner | GuestOwner


def ensure_owner(owner) -> Owner:
    """Fails fast when something other than an Owner reaches the cart/order code."""
    if not isinstance(owner, (UserOwner, GuestOwner)):
        raise TypeError(f"Expected UserOwner or GuestOwner, got {type(owner).__name__}")
    return owner
