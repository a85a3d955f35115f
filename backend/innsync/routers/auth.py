"""
Authentication routes
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.models.schemas import LoginRequest, LoginResponse, StaffResponse, PasswordStrengthRequest
from innsync.security.auth import authenticate, create_access_token, get_current_user, login_rate_limiter
from innsync.utils.security import check_password_strength

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Staff login"""
    if not login_rate_limiter.check(f"login:{data.username}"):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Terlalu banyak percobaan login. Coba lagi nanti."
        )
    try:
        staff = authenticate(db, data.username, data.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    login_rate_limiter.reset(f"login:{data.username}")
    return LoginResponse(
        access_token=create_access_token(staff.id, staff.role),
        staff=StaffResponse.model_validate(staff),
    )


@router.get("/me", response_model=StaffResponse)
def get_me(current_user: Staff = Depends(get_current_user)):
    return current_user


@router.post("/password-strength")
def password_strength(data: PasswordStrengthRequest):
    return check_password_strength(data.password)
