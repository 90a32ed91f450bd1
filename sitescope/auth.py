"""Bearer-token identity check.

Tokens are issued elsewhere; this module only maps a presented token to the
user id configured for it in ``settings.api_tokens``.
"""

from __future__ import annotations

import hmac
from typing import Optional

from sitescope.config import settings
from sitescope.errors import AuthError


def verify_token(authorization: Optional[str]) -> str:
    """Return the user id for an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthError: If the header is missing, malformed, or the token is unknown.
    """
    if not authorization or not authorization.strip():
        raise AuthError("No authorization header")

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthError("Invalid authentication")

    for known, user_id in settings.api_tokens.items():
        if hmac.compare_digest(known.encode(), token.encode()):
            return user_id
    raise AuthError("Invalid authentication")
