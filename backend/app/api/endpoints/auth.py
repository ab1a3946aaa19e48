"""
Authentication Endpoints

Name/password login for the back office. Sessions are kept client side;
the response carries the user record only.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.security import verify_password
from app.db.session import get_db
from app.exceptions import InvalidCredentialsError
from app.logging_config import get_logger
from app.models.user import User
from app.schemas.user import LoginRequest, LoginResponse, UserResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])

logger = get_logger(__name__)


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Check a name/password pair.

    Returns the user without its password; 401 on unknown name or wrong
    password (the two are not distinguished).
    """
    user = db.query(User).filter(User.name == request.name).first()
    if not user or not verify_password(request.password, user.password_hash):
        logger.warning("Failed login attempt", extra={"user_name": request.name})
        raise InvalidCredentialsError()

    logger.info("User logged in", extra={"user_id": user.id})
    return LoginResponse(user=UserResponse.model_validate(user))
