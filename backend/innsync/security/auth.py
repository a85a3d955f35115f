"""
Authentication and authorization

Staff log in with a username and bcrypt-hashed password and receive a
signed JWT. Endpoints guard themselves with role or permission checks.
"""
import bcrypt
import logging
from datetime import datetime, timedelta, timezone
from typing import List
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from innsync.config import settings
from innsync.database import get_db
from innsync.models.hotel import Staff, StaffRole
from innsync.security.permissions import has_permission
from innsync.utils.security import RateLimiter

logger = logging.getLogger(__name__)

security = HTTPBearer()

login_rate_limiter = RateLimiter(
    max_attempts=settings.LOGIN_RATE_LIMIT_ATTEMPTS,
    window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW,
)


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(staff_id: int, role: StaffRole) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(staff_id),
        "role": role.value if isinstance(role, StaffRole) else str(role),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token tidak valid"
        )


def authenticate(db: Session, username: str, password: str) -> Staff:
    """Check credentials; raises ValueError on failure"""
    staff = db.query(Staff).filter(Staff.username == username).first()
    if not staff or not verify_password(password, staff.password_hash):
        logger.warning(f"Failed login for {username}")
        raise ValueError("Username atau password salah")
    if not staff.is_active:
        raise ValueError("Akun tidak aktif")
    return staff


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Staff:
    payload = decode_token(credentials.credentials)

    try:
        staff_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token tidak valid")

    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Pengguna tidak ditemukan")
    if not staff.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Akun tidak aktif")

    return staff


def require_role(allowed_roles: List[StaffRole]):
    async def role_checker(current_user: Staff = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Akses ditolak")
        return current_user
    return role_checker


require_admin = require_role([StaffRole.ADMIN])
require_manager = require_role([StaffRole.ADMIN, StaffRole.MANAGER])
require_front_desk = require_role([StaffRole.ADMIN, StaffRole.MANAGER, StaffRole.RECEPTIONIST])


def require_permission(*permission_codes: str):
    """Pass when the caller's role holds any of the given permission codes"""
    async def permission_checker(current_user: Staff = Depends(get_current_user)):
        if any(has_permission(current_user.role, code) for code in permission_codes):
            return current_user
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Tidak memiliki izin: {', '.join(permission_codes)}"
        )
    return permission_checker
