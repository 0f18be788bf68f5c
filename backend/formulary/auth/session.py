"""Session cookie handling for anonymous visitors."""
from fastapi import Request, Response

from formulary.constants import SessionCookie
from formulary.utils.logger import logger
from formulary.utils.signing import generate_session_id, sign_session_id, unsign_session_id


def ensure_session(request: Request, response: Response) -> str:
    """
    Return the visitor's session id, minting one if needed.

    The signed cookie is (re)issued on every call so its six-month lifetime
    slides with activity. A cookie that fails verification is replaced.
    """
    settings = request.app.state.settings
    session_id = unsign_session_id(request.cookies.get(SessionCookie.NAME), settings.secret_key)

    if session_id is None:
        session_id = generate_session_id()
        logger.debug(f"Issued new session {session_id}")

    response.set_cookie(
        key=SessionCookie.NAME,
        value=sign_session_id(session_id, settings.secret_key),
        max_age=SessionCookie.MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.is_production,
        samesite=SessionCookie.SAME_SITE,
        path="/",
    )
    return session_id
