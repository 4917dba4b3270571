"""
Authentication service layer for business logic.

Every operation validates its input before touching the database, maps
duplicate-key failures to ConflictError, and turns any other unexpected
failure into a generic InternalError after rolling the session back.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Any, List, Optional

from fastapi import Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.audit_service import create_audit_log
from ..core.security import (
    hash_password,
    verify_password,
    dummy_verify,
    generate_random_password,
    create_access_token
)
from ..core.sessions import SessionStore
from ..medicos.models import Medico
from ..patients.models import Paciente
from .models import User, UserRole, PatientProfile, RoleProfile, build_role_profile
from .schemas import PacienteRegistration, SessionUser
from .exceptions import (
    AuthException,
    ValidationError,
    ConflictError,
    AuthenticationError,
    NotFoundError,
    InternalError
)

# Set up logging
logger = logging.getLogger(__name__)

USER_EXISTS = "User already exists"

# Wire name and attribute of every required Paciente field, in report order
PACIENTE_FIELDS = (
    ("DNI", "dni"),
    ("Nombre", "nombre"),
    ("Apellido", "apellido"),
    ("Edad", "edad"),
    ("Sexo", "sexo"),
    ("ObraSocial", "obra_social"),
    ("NroAfiliado", "nro_afiliado"),
)


@dataclass
class LoginResult:
    """
    The two independent outputs of a successful login.

    user is the payload a session store may keep; token is a stateless
    bearer token carrying the same claims.
    """
    user: SessionUser
    token: str


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_duplicate_key(error: IntegrityError) -> bool:
    """True when the store rejected a write for breaking a unique constraint."""
    # 23505 is unique_violation on PostgreSQL drivers
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


def _public_user(user: User) -> Dict[str, Any]:
    return {"id": user.id, "username": user.username, "role": user.role.value}


def _check_references(db: Session, profile: RoleProfile) -> None:
    """
    Ensure the profile points at records that exist.

    Raises:
        ValidationError: If a referenced Medico or Paciente does not exist
    """
    if profile.medico_id is not None:
        if not db.query(Medico).filter(Medico.id == profile.medico_id).first():
            raise ValidationError(f"Medico {profile.medico_id} does not exist")
    if profile.paciente_id is not None:
        if not db.query(Paciente).filter(Paciente.id == profile.paciente_id).first():
            raise ValidationError(f"Paciente {profile.paciente_id} does not exist")


async def register_user(
    db: Session,
    username: Optional[str],
    password: Optional[str],
    role: Optional[str],
    medico_id: Optional[int] = None,
    paciente_id: Optional[int] = None,
    actor_id: Optional[int] = None,
    request: Optional[Request] = None
) -> Dict[str, Any]:
    """
    Register a new user with the given role.

    Args:
        db: Database session
        username: Login identifier
        password: Plain text password
        role: Administrativo, Medico or Paciente
        medico_id: Medico profile reference (Medico only)
        paciente_id: Paciente profile reference (Paciente only)
        actor_id: ID of the administrator creating the account (for audit logging)
        request: FastAPI request object for audit logging

    Returns:
        Dict with the new user's id, username and role

    Raises:
        ValidationError: If a field is missing, the role is invalid or a reference is wrong
        ConflictError: If the username is already registered
        InternalError: On any unexpected failure
    """
    if _is_blank(username) or _is_blank(password) or _is_blank(role):
        raise ValidationError("Username, password and role are required")
    if role not in UserRole.values():
        raise ValidationError("Invalid role")
    try:
        profile = build_role_profile(UserRole(role), medico_id, paciente_id)
    except ValueError as e:
        raise ValidationError(str(e))

    logger.info(f"Registration attempt for username: {username} ({role})")
    try:
        _check_references(db, profile)

        existing_user = db.query(User).filter(User.username == username).first()
        if existing_user:
            logger.warning(f"Registration failed: Username {username} already registered")
            raise ConflictError(USER_EXISTS)

        user_obj = User.from_profile(username, hash_password(password), profile)
        db.add(user_obj)
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            if not _is_duplicate_key(e):
                raise
            # Lost a race with a concurrent registration of the same username
            logger.warning(f"Registration failed: Username {username} registered concurrently")
            raise ConflictError(USER_EXISTS)

        await create_audit_log(
            db,
            action="USER_REGISTERED",
            user_id=actor_id,
            request=request,
            details={"target_user_id": user_obj.id, "username": username, "role": role},
            commit=False
        )
        db.commit()
        db.refresh(user_obj)
        logger.info(f"User account created: {user_obj.id}")
        return _public_user(user_obj)
    except AuthException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error during registration: {str(e)}")
        raise InternalError()


async def login_user(
    db: Session,
    username: Optional[str],
    password: Optional[str],
    request: Optional[Request] = None
) -> LoginResult:
    """
    Authenticate a user and issue a bearer token.

    The caller decides whether to also keep the returned payload in a
    session; this function has no session side effect.

    Args:
        db: Database session
        username: Login identifier
        password: Plain text password
        request: FastAPI request object for audit logging

    Returns:
        LoginResult with the session payload and the signed token

    Raises:
        ValidationError: If a field is missing
        AuthenticationError: If the username is unknown or the password is wrong
        InternalError: On any unexpected failure
    """
    if _is_blank(username) or _is_blank(password):
        raise ValidationError("Username and password are required")
    try:
        user = db.query(User).filter(User.username == username).first()
        if not user:
            dummy_verify()
            logger.warning(f"Login failed: Invalid credentials for {username}")
            raise AuthenticationError()
        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: Invalid credentials for {username}")
            raise AuthenticationError()

        session_user = SessionUser(
            id=user.id,
            username=user.username,
            role=user.role,
            medico_id=user.medico_id,
            paciente_id=user.paciente_id
        )
        token = create_access_token(session_user.claims())

        await create_audit_log(db, action="USER_LOGIN", user_id=user.id, request=request)
        logger.info(f"Login successful: User {user.id}")
        return LoginResult(user=session_user, token=token)
    except AuthException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error during login: {str(e)}")
        raise InternalError()


def logout_user(session_store: SessionStore, session_id: Optional[str]) -> Dict[str, Any]:
    """
    Destroy the caller's session.

    Args:
        session_store: Store holding the session
        session_id: Opaque id from the session cookie (may be missing)

    Returns:
        Dict with logout success message

    Raises:
        InternalError: If the session store fails to destroy the session
    """
    try:
        session_store.destroy(session_id)
    except Exception as e:
        logger.error(f"Failed to destroy session: {str(e)}")
        raise InternalError("Could not close session")
    return {"message": "Session closed successfully"}


async def register_paciente_public(
    db: Session,
    registration: PacienteRegistration,
    request: Optional[Request] = None
) -> Dict[str, Any]:
    """
    Public patient self-registration.

    Creates the Paciente record and its Paciente account in one transaction:
    if the account cannot be created, the Paciente is rolled back with it.

    Args:
        db: Database session
        registration: Identifier, optional password and patient fields
        request: FastAPI request object for audit logging

    Returns:
        Dict with the public fields of the created account and patient

    Raises:
        ValidationError: If the identifier or any patient field is missing
        ConflictError: If the username or the DNI is already registered
        InternalError: On any unexpected failure
    """
    username = registration.google_email if _is_blank(registration.username) else registration.username
    if _is_blank(username):
        raise ValidationError("Username (email) is required")

    missing = [wire for wire, attr in PACIENTE_FIELDS if _is_blank(getattr(registration, attr))]
    if missing:
        raise ValidationError(f"Missing patient fields: {', '.join(missing)}")

    logger.info(f"Patient self-registration attempt for username: {username}")
    try:
        existing_user = db.query(User).filter(User.username == username).first()
        if existing_user:
            logger.warning(f"Patient registration failed: Username {username} already registered")
            raise ConflictError(USER_EXISTS)

        paciente = Paciente(
            dni=registration.dni,
            nombre=registration.nombre,
            apellido=registration.apellido,
            edad=registration.edad,
            sexo=registration.sexo,
            obra_social=registration.obra_social,
            nro_afiliado=registration.nro_afiliado
        )
        db.add(paciente)
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            if not _is_duplicate_key(e):
                raise
            logger.warning("Patient registration failed: DNI already registered")
            raise ConflictError("Patient DNI already exists")

        # Google sign-ups get a random password nobody knows
        federated = _is_blank(registration.password)
        password = generate_random_password() if federated else registration.password
        user_obj = User.from_profile(
            username,
            hash_password(password),
            PatientProfile(paciente_id=paciente.id)
        )
        db.add(user_obj)
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            if not _is_duplicate_key(e):
                raise
            logger.warning(f"Patient registration failed: Username {username} registered concurrently")
            raise ConflictError(USER_EXISTS)

        await create_audit_log(
            db,
            action="PATIENT_SELF_REGISTERED",
            user_id=user_obj.id,
            request=request,
            details={"paciente_id": paciente.id, "federated": federated},
            commit=False
        )
        db.commit()
        db.refresh(user_obj)
        db.refresh(paciente)
        logger.info(f"Patient account created: user {user_obj.id}, paciente {paciente.id}")
        return {
            "usuario": _public_user(user_obj),
            "paciente": {
                "id": paciente.id,
                "DNI": paciente.dni,
                "Nombre": paciente.nombre,
                "Apellido": paciente.apellido
            }
        }
    except AuthException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error during patient self-registration: {str(e)}")
        raise InternalError()


async def update_user(
    db: Session,
    user_id: int,
    username: Optional[str] = None,
    password: Optional[str] = None,
    actor_id: Optional[int] = None,
    request: Optional[Request] = None
) -> Dict[str, Any]:
    """
    Replace a user's username and/or password.

    Args:
        db: Database session
        user_id: ID of the user to update
        username: New login identifier (optional)
        password: New plain text password (optional)
        actor_id: ID of the administrator making the change
        request: FastAPI request object for audit logging

    Returns:
        Dict with update success message

    Raises:
        ValidationError: If neither field is supplied
        NotFoundError: If the user does not exist
        ConflictError: If the store rejects the new username as a duplicate
        InternalError: On any unexpected failure
    """
    if _is_blank(username) and _is_blank(password):
        raise ValidationError("At least one field is required to update (username or password)")
    try:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError()

        changed = []
        if not _is_blank(username):
            user.username = username
            changed.append("username")
        if not _is_blank(password):
            user.password_hash = hash_password(password)
            changed.append("password")

        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            if not _is_duplicate_key(e):
                raise
            logger.warning(f"Update of user {user_id} failed: username already taken")
            raise ConflictError(USER_EXISTS)

        await create_audit_log(
            db,
            action="USER_UPDATED",
            user_id=actor_id,
            request=request,
            details={"target_user_id": user_id, "fields": changed},
            commit=False
        )
        db.commit()
        logger.info(f"User {user_id} updated ({', '.join(changed)})")
        return {"message": "User updated successfully"}
    except AuthException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating user {user_id}: {str(e)}")
        raise InternalError()


async def delete_user(
    db: Session,
    user_id: int,
    actor_id: Optional[int] = None,
    request: Optional[Request] = None
) -> Dict[str, Any]:
    """
    Delete a user.

    Raises:
        NotFoundError: If the user does not exist
        InternalError: On any unexpected failure
    """
    try:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError()

        # An account deleting itself leaves no row for the entry to point at
        await create_audit_log(
            db,
            action="USER_DELETED",
            user_id=None if actor_id == user_id else actor_id,
            request=request,
            details={"target_user_id": user_id, "username": user.username, "actor_id": actor_id},
            commit=False
        )
        db.delete(user)
        db.commit()
        logger.info(f"User {user_id} deleted")
        return {"message": "User deleted successfully"}
    except AuthException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting user {user_id}: {str(e)}")
        raise InternalError()


async def get_all_users(db: Session) -> List[Dict[str, Any]]:
    """
    List every user as {id, username, role}.

    Hashes and profile references are never selected.
    """
    try:
        rows = db.query(User.id, User.username, User.role).order_by(User.id).all()
        return [{"id": row.id, "username": row.username, "role": row.role.value} for row in rows]
    except Exception as e:
        logger.error(f"Error fetching users: {str(e)}")
        raise InternalError()
