"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes

Tokens are stateless: the claims carry everything a handler needs
(id, username, role/type, name, rollNumber), so no lookup happens per request.
"""

from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import get_settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (auto_error off so a missing header is a 401, not a 403)
bearer_scheme = HTTPBearer(auto_error=False)

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def create_student_token(student: dict) -> str:
    """Issue a session token for a student document."""
    return create_access_token({
        "id": student["id"],
        "username": student.get("username"),
        "rollNumber": student.get("rollNumber"),
        "name": student.get("name"),
        "role": ROLE_STUDENT,
        "type": ROLE_STUDENT,
    })


def create_admin_token(username: str) -> str:
    """Issue a session token for the admin reviewer."""
    return create_access_token({
        "id": f"admin:{username}",
        "username": username,
        "name": "Administrator",
        "rollNumber": None,
        "role": ROLE_ADMIN,
    })


def get_role(claims: dict) -> Optional[str]:
    """Role claim; older student tokens only carry `type`."""
    return claims.get("role") or claims.get("type")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """
    FastAPI dependency - Get current authenticated caller's claims.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: No token provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("id") or get_role(payload) not in (ROLE_STUDENT, ROLE_ADMIN):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload["role"] = get_role(payload)
    return payload


async def get_current_student(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require student role with a roll number."""
    if user["role"] != ROLE_STUDENT:
        raise HTTPException(status_code=403, detail="Students only")
    if not user.get("rollNumber"):
        raise HTTPException(status_code=403, detail="Token is missing a roll number")
    return user


async def get_current_admin(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require admin role."""
    if user["role"] != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Admins only")
    return user
