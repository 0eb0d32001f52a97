"""
hatchjudge/security/principal.py
Bearer-token principal and hackathon admin gate.

The principal is resolved per request from the JWT ``sub`` claim and passed
explicitly to whatever needs it. Admin membership is checked against the
hackathon's admin set before any mutating call reaches a service.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Path
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from hatchjudge.config.settings import settings
from hatchjudge.database import get_db
from hatchjudge.engine.errors import JudgingError
from hatchjudge.errors import (
    ErrorCode, ForbiddenError, UnauthorizedError, judging_error_to_api_error,
)
from hatchjudge.services.hackathon_store import HackathonStore

logger = logging.getLogger(__name__)

ACCESS_TOKEN_EXPIRE_MINUTES = 30

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


class Principal(BaseModel):
    """Authenticated caller. ``id`` is the JWT subject."""
    id: str


def create_access_token(principal_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed access token for ``principal_id``."""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(principal_id),
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


async def get_current_principal(token: Optional[str] = Depends(oauth2_scheme)) -> Principal:
    if not token:
        raise UnauthorizedError()

    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Could not validate credentials", code=ErrorCode.AUTH_INVALID)

    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedError("Could not validate credentials", code=ErrorCode.AUTH_INVALID)
    return Principal(id=str(subject))


async def require_hackathon_admin(
    code: str = Path(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """
    Require the caller to be an admin of hackathon ``code``.
    Use as: Depends(require_hackathon_admin)
    """
    try:
        hackathon = await HackathonStore(db).load(code)
    except JudgingError as e:
        raise judging_error_to_api_error(e)

    if not hackathon.is_admin(principal.id):
        logger.warning(f"Access denied: principal {principal.id} is not an admin of {code}")
        raise ForbiddenError(
            f"Only admins of hackathon {code} can perform this action",
            code=ErrorCode.NOT_HACKATHON_ADMIN,
        )
    return principal
