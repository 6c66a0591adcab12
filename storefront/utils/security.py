# storefront/utils/security.py
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from storefront.utils.settings import JWT_SECRET, JWT_ISSUER, JWT_EXPIRE_HOURS

ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash in the database
        return False


def create_access_token(user_id: int, username: str, email: str, role: str) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "user_id": user_id,
        "username": username,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=JWT_EXPIRE_HOURS),
        "iss": JWT_ISSUER,
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decodes and validates a token (signature, expiry, issuer).
    Raises jwt.InvalidTokenError on any problem.
    """
    return jwt.decode(
        token,
        JWT_SECRET,
        algorithms=[ALGORITHM],
        issuer=JWT_ISSUER,
        options={"require": ["exp", "iat", "user_id"]},
    )
