"""Session id generation and cookie signing."""
import secrets
import time
from typing import Optional

from itsdangerous import BadSignature, Signer

from formulary.constants import SessionCookie


def generate_session_id() -> str:
    """
    Generate a new session id.

    Returns:
        A new session id string (format: session_<ms>_<random>)
    """
    return f"session_{int(time.time() * 1000)}_{secrets.token_hex(8)}"


def _signer(secret_key: str) -> Signer:
    return Signer(secret_key, salt=SessionCookie.SIGNER_SALT)


def sign_session_id(session_id: str, secret_key: str) -> str:
    """
    Sign a session id for storage in the ``sid`` cookie.

    Args:
        session_id: The raw session id
        secret_key: Application secret

    Returns:
        Signed cookie value
    """
    return _signer(secret_key).sign(session_id).decode()


def unsign_session_id(cookie_value: Optional[str], secret_key: str) -> Optional[str]:
    """
    Verify a ``sid`` cookie value.

    Args:
        cookie_value: Raw cookie value, possibly missing
        secret_key: Application secret

    Returns:
        The session id, or None if the cookie is missing or forged
    """
    if not cookie_value:
        return None
    try:
        return _signer(secret_key).unsign(cookie_value).decode()
    except BadSignature:
        return None
