import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from participium.database import get_db
from participium.errors import UnauthorizedError
from participium.models import User
from participium.schemas.auth import LoginRequest, Token, UserResponse
from participium.utils.roles import get_user_role_names
from participium.utils.security import authenticate_user, create_access_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, credentials.username.strip(), credentials.password)
    if not user:
        logger.info("Failed login for username=%s", credentials.username)
        raise UnauthorizedError("Invalid username or password")

    access_token = create_access_token(data={"sub": str(user.id)})
    return Token(access_token=access_token)


@router.get("/me", response_model=UserResponse)
def read_me(current_user: User = Depends(get_current_user)):
    return UserResponse(
        id=current_user.id,
        username=current_user.username,
        email=current_user.email,
        first_name=current_user.first_name,
        last_name=current_user.last_name,
        roles=get_user_role_names(current_user),
    )
