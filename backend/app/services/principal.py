"""Principal resolution from bearer credentials."""
import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.exceptions import InactiveAccountError, UnauthenticatedError
from app.models.user import User, UserRole
from app.services.credentials import decode_access_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller.

    Built from the stored user row, never from token claims, and passed
    explicitly to every guard.
    """

    id: uuid.UUID
    email: str
    full_name: str
    role: UserRole
    tenant_id: uuid.UUID | None

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    @property
    def is_tenant_admin(self) -> bool:
        return self.role == UserRole.TENANT_ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=UserRole(user.role),
            tenant_id=user.tenant_id,
        )


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise UnauthenticatedError("Access token required")
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        raise UnauthenticatedError("Malformed authorization header")
    return token


def resolve_principal(db: Session, token: str, secret_key: str) -> Principal:
    """Verify ``token`` and load the user it names."""
    claims = decode_access_token(token, secret_key)
    try:
        user_id = uuid.UUID(str(claims.get("sub")))
    except ValueError:
        raise UnauthenticatedError("Invalid or expired token")

    user = db.get(User, user_id)
    if user is None:
        logger.info(f"Token references missing user {user_id}")
        raise UnauthenticatedError("User no longer exists")
    if not user.is_active:
        raise InactiveAccountError()
    return Principal.from_user(user)
