"""
Bearer token issuance and verification, plus the HR manager role check.

Tokens are HS256 JWTs carrying whatever claims the client posted to
``/jwt`` and a fixed expiry. The caller's role is never trusted from the
token: it is re-read from the users collection on every protected call.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict

import jwt
from fastapi import APIRouter, Body, Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pymongo.database import Database

from config import settings
from database import USERS, get_db
from errors import Forbidden, Unauthorized
from schemas import HR_MANAGER

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

router = APIRouter(tags=["auth"])


def create_token(claims: Dict) -> str:
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(hours=settings.TOKEN_EXPIRY_HOURS)
    return jwt.encode(payload, settings.ACCESS_TOKEN_SECRET, algorithm=settings.TOKEN_ALGORITHM)


def decode_token(token: str) -> Dict:
    try:
        return jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.TOKEN_ALGORITHM])
    except jwt.InvalidTokenError as e:
        logger.info("Rejected token: %s", e)
        raise Unauthorized()


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise Unauthorized()
    claims = decode_token(credentials.credentials)
    if not claims.get("email"):
        raise Unauthorized()
    request.state.claims = claims
    return claims


def require_hr_manager(
    request: Request,
    claims: Dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Dict:
    email = claims.get("email")
    user = db[USERS].find_one({"email": email})
    if not user or user.get("role") != HR_MANAGER:
        logger.warning(
            "Access denied: %s attempted %s %s (requires %s)",
            email,
            request.method,
            request.url.path,
            HR_MANAGER,
        )
        raise Forbidden()
    return claims


@router.post("/jwt")
def issue_token(claims: Dict = Body(...)):
    token = create_token(claims)
    return {"token": token}
