"""
Request authentication.

Every /v1 endpoint depends on get_current_user_id. The JWT subject is the
user id that profiles and metrics are keyed by.
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import UnauthorizedError
from core.security import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header yields our 401 rather than FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    claims = decode_access_token(credentials.credentials)
    if claims is None:
        logger.info("Rejected bearer token that failed verification")
        raise UnauthorizedError("Invalid authentication credentials")

    subject = str(claims.get("sub") or "").strip()
    if not subject:
        raise UnauthorizedError("Token has no subject")
    return subject
