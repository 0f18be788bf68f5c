"""Admin token check for catalog write endpoints."""
import secrets
from typing import Optional

from fastapi import Header, Request

from formulary.utils.exceptions import authentication_error


def require_admin(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> None:
    """
    Require ``Authorization: Bearer <admin_token>`` on write endpoints.

    When no admin token is configured, writes are open.

    Raises:
        HTTPException: If the token is missing or wrong
    """
    expected = request.app.state.settings.admin_token
    if not expected:
        return

    if not authorization or not secrets.compare_digest(
        authorization.encode(), f"Bearer {expected}".encode()
    ):
        raise authentication_error("Not authorized")
