"""
User Management Endpoints

Roles:
- admin: can not be deleted through the API
- user: regular back-office account
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.db.session import get_db
from app.exceptions import DuplicateError, NotFoundError, PermissionDeniedError
from app.logging_config import get_logger
from app.models.user import User
from app.schemas.common import SuccessResponse
from app.schemas.user import PasswordReset, UserCreate, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])

logger = get_logger(__name__)


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User", user_id)
    return user


# ============================================================================
# LIST / CREATE
# ============================================================================

@router.get("", response_model=List[UserResponse])
async def list_users(db: Session = Depends(get_db)):
    """All users, without passwords."""
    return db.query(User).order_by(User.id).all()


@router.post("", response_model=UserResponse)
async def create_user(request: UserCreate, db: Session = Depends(get_db)):
    """Create a user. Names are unique."""
    if db.query(User).filter(User.name == request.name).first():
        raise DuplicateError("User", field="name", value=request.name, message="User already exists")

    user = User(
        name=request.name,
        password_hash=hash_password(request.password),
        role=request.role or "user",
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Created user", extra={"user_id": user.id, "role": user.role})
    return user


# ============================================================================
# DELETE / PASSWORD
# ============================================================================

@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user(user_id: int, db: Session = Depends(get_db)):
    """Delete a user. Admin accounts are protected."""
    user = _get_user(db, user_id)
    if user.is_admin:
        raise PermissionDeniedError("Cannot delete admin user", action="delete", resource="User")

    db.delete(user)
    db.commit()

    logger.info("Deleted user", extra={"user_id": user_id})
    return SuccessResponse()


@router.put("/{user_id}/password", response_model=SuccessResponse)
async def reset_password(user_id: int, request: PasswordReset, db: Session = Depends(get_db)):
    """Set a new password for a user."""
    user = _get_user(db, user_id)
    user.password_hash = hash_password(request.password)
    db.commit()

    logger.info("Password reset", extra={"user_id": user_id})
    return SuccessResponse()
