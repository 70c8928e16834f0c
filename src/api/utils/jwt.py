from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode a bearer token issued by the authentication service.

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid (``sub`` holds the actor id), None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            ApplicationConfig.JWT_SECRET,
            algorithms=[ApplicationConfig.JWT_ALGORITHM],
        )
    except JWTError:
        return None

    if not payload.get("sub"):
        return None
    return payload
