"""Authentication endpoints and the bearer-token dependencies used by other routers."""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr, constr

from .. import config
from ..db import get_db
from ..models.auth_models import User
from ..auth.passwords import hash_password, verify_password
from ..auth.tokens import AuthenticatedPrincipal, issue_token, principal_from_token
from ..services.errors import Conflict, Forbidden, InvalidInput, Unauthorized
from .schemas_geo import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

bearer_scheme = HTTPBearer(auto_error=False)

REGISTERABLE_ROLES = (config.ROLE_USER, config.ROLE_BUSINESS_OWNER)


class RegisterRequest(BaseModel):
    username: constr(strip_whitespace=True, min_length=3, max_length=50)
    email: EmailStr
    password: constr(min_length=8, max_length=128)
    role: str = config.ROLE_USER


class LoginRequest(BaseModel):
    username: constr(strip_whitespace=True, min_length=1)
    password: str


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(CamelModel):
    user_id: str
    username: str
    email: str
    role: str


def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[AuthenticatedPrincipal]:
    """Principal from the Authorization header, or None when absent or invalid."""
    if credentials is None or not credentials.credentials:
        return None
    return principal_from_token(credentials.credentials)


def require_principal(
    principal: Optional[AuthenticatedPrincipal] = Depends(get_principal),
) -> AuthenticatedPrincipal:
    if principal is None:
        raise Unauthorized("Invalid or missing token.")
    return principal


def require_role(*roles: str):
    def dependency(principal: AuthenticatedPrincipal = Depends(require_principal)) -> AuthenticatedPrincipal:
        if not principal.has_role(*roles):
            logger.warning("User %s with role %s denied, requires %s", principal.user_id, principal.role, roles)
            raise Forbidden("You do not have permission to perform this action.")
        return principal
    return dependency


def _user_out(user: User) -> UserResponse:
    return UserResponse(user_id=user.id, username=user.username, email=user.email, role=user.role)


@router.post("/register", response_model=UserResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create a traveller or business-owner account."""
    if payload.role not in REGISTERABLE_ROLES:
        raise InvalidInput(f"Role must be one of: {', '.join(REGISTERABLE_ROLES)}.")

    email = payload.email.lower().strip()
    existing = db.query(User).filter(
        or_(
            func.lower(User.username) == payload.username.lower(),
            User.email == email,
        )
    ).first()
    if existing:
        raise Conflict("Username or email is already registered.")

    user = User(
        username=payload.username,
        email=email,
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, user.role)
    return _user_out(user)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Exchange username and password for a bearer token."""
    user = db.query(User).filter(func.lower(User.username) == payload.username.lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.username)
        raise Unauthorized("Invalid username or password.")

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()

    return TokenResponse(access_token=issue_token(user.id, user.username, user.role))


@router.get("/me", response_model=UserResponse)
def get_me(
    principal: AuthenticatedPrincipal = Depends(require_principal),
    db: Session = Depends(get_db),
):
    """Get current authenticated user."""
    user = db.query(User).filter(User.id == principal.user_id).first()
    if not user:
        raise Unauthorized("User not found.")
    return _user_out(user)
