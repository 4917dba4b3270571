"""
User Schemas - Pydantic models for request validation and response serialization.

Request fields are optional on purpose: the workflow checks presence itself so
that missing fields are reported with its own messages (and, for patient
self-registration, all at once).
"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from .models import UserRole


class RegisterRequest(BaseModel):
    """
    Registration Schema - Used by administrative staff to create an account

    Fields:
    - username: Login identifier
    - password: Plain text password (hashed before storage)
    - role: Administrativo, Medico or Paciente
    - medicoId: Medico profile reference (Medico accounts only)
    - pacienteId: Paciente profile reference (Paciente accounts only)
    """
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    medico_id: Optional[int] = Field(None, alias="medicoId")
    paciente_id: Optional[int] = Field(None, alias="pacienteId")

    class Config:
        populate_by_name = True


class LoginRequest(BaseModel):
    """
    Login Schema - Used for authentication

    Fields:
    - username: Login identifier
    - password: Plain text password
    """
    username: Optional[str] = None
    password: Optional[str] = None


class PacienteRegistration(BaseModel):
    """
    Patient Self-Registration Schema - Creates a Paciente and its Paciente account

    Either username or googleEmail identifies the account. Password is optional
    for accounts created through Google sign-in.
    """
    username: Optional[str] = None
    google_email: Optional[str] = Field(None, alias="googleEmail")
    password: Optional[str] = None
    dni: Optional[str] = Field(None, alias="DNI")
    nombre: Optional[str] = Field(None, alias="Nombre")
    apellido: Optional[str] = Field(None, alias="Apellido")
    edad: Optional[int] = Field(None, alias="Edad", ge=0)
    sexo: Optional[str] = Field(None, alias="Sexo")
    obra_social: Optional[str] = Field(None, alias="ObraSocial")
    nro_afiliado: Optional[str] = Field(None, alias="NroAfiliado")

    class Config:
        populate_by_name = True

    @field_validator("dni", "nro_afiliado", mode="before")
    @classmethod
    def numbers_as_text(cls, value):
        # Document and member numbers often arrive as JSON numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class UserUpdate(BaseModel):
    """
    User Update Schema - Used by administrative staff

    Fields:
    - username: New login identifier (optional)
    - password: New plain text password (optional)
    """
    username: Optional[str] = None
    password: Optional[str] = None


class UserSummary(BaseModel):
    """
    User Summary Schema - Public projection of an identity record

    Never includes the password hash or profile references.
    """
    id: int
    username: str
    role: UserRole

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True


class SessionUser(BaseModel):
    """
    Session Payload Schema - Stored in the session and signed into the token
    """
    id: int
    username: str
    role: UserRole
    medico_id: Optional[int] = Field(None, alias="medicoId")
    paciente_id: Optional[int] = Field(None, alias="pacienteId")

    class Config:
        populate_by_name = True

    def claims(self) -> Dict[str, Any]:
        """JSON-safe claim set using the wire names."""
        return self.model_dump(mode="json", by_alias=True)


class AuditLogResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    action: str
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    timestamp: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    success: bool = True
    data: List[UserSummary]
