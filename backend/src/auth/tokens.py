"""Bearer tokens signed with HMAC-SHA256."""
import json
import hmac
import hashlib
import base64
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict

from .. import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """Identity of the caller, extracted from a verified bearer token."""
    user_id: str
    username: str
    role: str

    def has_role(self, *roles: str) -> bool:
        return self.role in roles


def _signature(data: str) -> str:
    return hmac.new(
        config.SECRET_KEY.encode(),
        data.encode(),
        hashlib.sha256
    ).hexdigest()


def _verify_signed_data(signed_data: str) -> Optional[str]:
    """Verify and extract data from signed string."""
    if "." not in signed_data:
        return None
    data, signature = signed_data.rsplit(".", 1)
    if not hmac.compare_digest(signature, _signature(data)):
        return None
    return data


def issue_token(user_id: str, username: str, role: str, ttl: Optional[timedelta] = None) -> str:
    """Create a signed bearer token for a user."""
    expires = datetime.now(timezone.utc) + (ttl or timedelta(hours=config.ACCESS_TOKEN_TTL_HOURS))
    claims = {
        "sub": user_id,
        "username": username,
        "role": role,
        "exp": expires.isoformat(),
    }
    json_data = json.dumps(claims)
    signed = f"{json_data}.{_signature(json_data)}"
    return base64.urlsafe_b64encode(signed.encode()).decode()


def read_claims(token: str) -> Optional[Dict]:
    """Verify a token and return its claims, or None if it is invalid or expired."""
    try:
        decoded = base64.urlsafe_b64decode(token.encode()).decode()
    except (ValueError, UnicodeDecodeError):
        return None

    data = _verify_signed_data(decoded)
    if not data:
        return None

    try:
        claims = json.loads(data)
        expires_at = datetime.fromisoformat(claims["exp"])
    except (ValueError, KeyError, TypeError):
        return None
    if expires_at < datetime.now(timezone.utc):
        logger.info("Rejected expired token for subject %s", claims.get("sub"))
        return None

    return claims


def principal_from_token(token: str) -> Optional[AuthenticatedPrincipal]:
    claims = read_claims(token)
    if not claims or not claims.get("sub"):
        return None
    return AuthenticatedPrincipal(
        user_id=str(claims["sub"]),
        username=claims.get("username") or "",
        role=claims.get("role") or config.ROLE_USER,
    )
