"""
FastAPI dependencies for authentication and authorization.

A caller is identified by a bearer token or, when no token is sent, by the
server-side session named in the session cookie.
"""
from typing import List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..config import settings
from ..core.security import verify_token
from ..core.sessions import SessionStore, get_session_store
from ..database import get_db
from .exceptions import AuthenticationError, PermissionDeniedError
from .models import User, UserRole

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store)
) -> User:
    """
    Get current authenticated user from the bearer token or the session.

    Args:
        request: FastAPI request object (for the session cookie)
        credentials: Bearer credentials from the Authorization header
        db: Database session
        sessions: Session store

    Returns:
        User: Current authenticated user

    Raises:
        AuthenticationError: If the token is invalid/expired or no session exists
    """
    user_id = None
    if credentials:
        payload = verify_token(credentials.credentials)
        if not payload:
            raise AuthenticationError("Invalid or expired token")
        user_id = payload.get("id")
    else:
        session_id = request.cookies.get(settings.session_cookie_name)
        record = sessions.get(session_id) if session_id else None
        if record:
            user_id = record.user.get("id")

    if not user_id:
        raise AuthenticationError("Not authenticated")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthenticationError("User not found")
    return user


def require_roles(allowed_roles: List[UserRole]):
    """
    Dependency factory to require specific roles.

    Args:
        allowed_roles: List of roles that are allowed access

    Returns:
        Function that checks if user has required role
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise PermissionDeniedError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}. "
                f"Your role: {current_user.role.value}"
            )
        return current_user
    return role_checker


require_administrativo = require_roles([UserRole.ADMINISTRATIVE])
