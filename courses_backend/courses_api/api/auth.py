"""
HTTP Basic authentication gate.

authenticate_user is the dependency protected routes declare. It resolves the
credentials to a User or raises AuthenticationError; the reason it carries is
logged here and never sent to the client.
"""

import base64
import binascii
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from courses_api.api.core import dummy_verify, get_user_by_email, verify_password
from courses_api.api.errors import AuthenticationError
from courses_api.db.db import get_db
from courses_api.db.models import User

logger = logging.getLogger(__name__)


def _deny(reason: str) -> AuthenticationError:
    logger.warning("Authentication failed: %s", reason)
    return AuthenticationError(reason)


# PUBLIC_INTERFACE
async def read_credentials(request: Request) -> Optional[HTTPBasicCredentials]:
    """Decode the Basic Authorization header as UTF-8, or None when there is none."""
    scheme, param = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() != "basic":
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except (ValueError, binascii.Error):
        raise _deny("malformed credentials")
    username, separator, password = decoded.partition(":")
    if not separator:
        raise _deny("malformed credentials")
    return HTTPBasicCredentials(username=username, password=password)


# PUBLIC_INTERFACE
def authenticate_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(read_credentials),
    db: Session = Depends(get_db),
) -> User:
    """Return the user named by the Basic credentials, fails with 401 otherwise."""
    if credentials is None:
        raise _deny("missing credentials")

    user = get_user_by_email(db, credentials.username)
    if user is None:
        dummy_verify()
        raise _deny("unknown identity")

    if not verify_password(credentials.password, user.password):
        raise _deny(f"bad secret for email: {user.emailAddress}")

    return user
