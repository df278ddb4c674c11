from datetime import datetime, timedelta, UTC
from typing import Callable, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from participium.config import settings
from participium.crud import UserRepository
from participium.database import get_db
from participium.errors import InsufficientRightsError, UnauthorizedError
from participium.models import User
from participium.utils.roles import get_user_role_names


# ==========================
# AUTH CONFIG
# ==========================

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto"
)


# ==========================
# PASSWORD UTILS
# ==========================

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Bcrypt max input length = 72 bytes
    Truncate safely to avoid crash
    """
    password_bytes = password.encode("utf-8")

    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
        password = password_bytes.decode("utf-8", errors="ignore")

    return pwd_context.hash(password)


# ==========================
# JWT TOKEN
# ==========================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# ==========================
# AUTH HELPERS
# ==========================

def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = UserRepository(db).find_user_by_username(username)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
        subject = payload.get("sub")
        if subject is None:
            raise UnauthorizedError("Not authenticated")
        user_id = int(subject)
    except (JWTError, ValueError):
        raise UnauthorizedError("Not authenticated")

    user = UserRepository(db).find_user_by_id(user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("Not authenticated")
    return user


def require_roles(*role_names: str) -> Callable[..., User]:
    """Dependency factory: the current user must hold one of ``role_names``."""
    allowed = set(role_names)

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not allowed.intersection(get_user_role_names(current_user)):
            raise InsufficientRightsError(
                f"Access restricted to roles: {', '.join(sorted(allowed))}"
            )
        return current_user

    return dependency
