"""
Authentication routes for the clinic system.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from ..config import settings
from ..core.audit_service import get_audit_logs
from ..core.sessions import SessionStore, get_session_store
from ..database import get_db
from .dependencies import get_current_user, require_administrativo
from .models import User
from .schemas import (
    RegisterRequest, LoginRequest, PacienteRegistration, UserUpdate,
    UserListResponse, AuditLogResponse
)
from .service import (
    register_user, login_user, logout_user, register_paciente_public,
    update_user, delete_user, get_all_users
)

# Create API router
router = APIRouter()


# ============================================================================
# REGISTRATION ROUTES
# ============================================================================

@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Register User (Administrativo only)")
async def register_route(
    data: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: User = Depends(require_administrativo)
):
    """
    Create an account with any role.

    Medico and Paciente accounts may reference an existing Medico or
    Paciente profile; Administrativo accounts never reference one.
    """
    user = await register_user(
        db=db,
        username=data.username,
        password=data.password,
        role=data.role,
        medico_id=data.medico_id,
        paciente_id=data.paciente_id,
        actor_id=current_admin.id,
        request=request
    )
    return {"success": True, "message": "User registered successfully", "data": user}


@router.post("/register/paciente", status_code=status.HTTP_201_CREATED, summary="Patient Self-Registration")
async def register_paciente_route(
    data: PacienteRegistration,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Public patient self-registration.

    Creates the Paciente record and its Paciente account. googleEmail is
    used as the username when no username is given; a password is optional
    for Google sign-ups.
    """
    result = await register_paciente_public(db=db, registration=data, request=request)
    return {"success": True, "message": "Patient and user created successfully", "data": result}


# ============================================================================
# SESSION ROUTES
# ============================================================================

@router.post("/login", status_code=status.HTTP_200_OK, summary="User Login")
async def login_route(
    data: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store)
):
    """
    User login endpoint.

    Returns the session payload and a bearer token valid for one hour, and
    opens a server-side session referenced by the session cookie.
    """
    result = await login_user(db=db, username=data.username, password=data.password, request=request)
    payload = result.user.claims()

    record = sessions.create(payload)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=record.session_id,
        max_age=sessions.ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure
    )
    return {"success": True, "message": "Login successful", "data": payload, "token": result.token}


@router.post("/logout", status_code=status.HTTP_200_OK, summary="User Logout")
async def logout_route(
    request: Request,
    response: Response,
    sessions: SessionStore = Depends(get_session_store)
):
    """
    Logout endpoint.

    Destroys the server-side session and clears the session cookie. Bearer
    tokens are stateless and stay valid until they expire.
    """
    result = logout_user(sessions, request.cookies.get(settings.session_cookie_name))
    response.delete_cookie(settings.session_cookie_name)
    return {"success": True, "message": result["message"]}


@router.get("/me", summary="Get Current User")
async def get_current_user_route(current_user: User = Depends(get_current_user)):
    """Return the caller's session payload."""
    profile = current_user.profile
    return {
        "success": True,
        "data": {
            "id": current_user.id,
            "username": current_user.username,
            "role": profile.role.value,
            "medicoId": profile.medico_id,
            "pacienteId": profile.paciente_id
        }
    }


# ============================================================================
# USER MANAGEMENT ROUTES (Administrativo only)
# ============================================================================

@router.get("/users", response_model=UserListResponse, summary="List Users")
async def list_users_route(
    db: Session = Depends(get_db),
    current_admin: User = Depends(require_administrativo)
):
    """List every user as id, username and role."""
    return {"success": True, "data": await get_all_users(db)}


@router.put("/users/{user_id}", status_code=status.HTTP_200_OK, summary="Update User")
async def update_user_route(
    user_id: int,
    data: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: User = Depends(require_administrativo)
):
    """Replace a user's username and/or password."""
    result = await update_user(
        db=db,
        user_id=user_id,
        username=data.username,
        password=data.password,
        actor_id=current_admin.id,
        request=request
    )
    return {"success": True, "message": result["message"]}


@router.delete("/users/{user_id}", status_code=status.HTTP_200_OK, summary="Delete User")
async def delete_user_route(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_admin: User = Depends(require_administrativo)
):
    """Delete a user."""
    result = await delete_user(db=db, user_id=user_id, actor_id=current_admin.id, request=request)
    return {"success": True, "message": result["message"]}


@router.get("/admin/audit-logs", response_model=List[AuditLogResponse], summary="Admin Retrieves Audit Logs")
async def get_audit_logs_route(
    user_id_filter: Optional[int] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_admin: User = Depends(require_administrativo)
):
    """Retrieves audit logs. Admins can filter by user_id."""
    return await get_audit_logs(db=db, user_id_filter=user_id_filter, limit=limit, offset=offset)
