"""
User Model - Stores the identity record used for authentication.

An identity is always built from a role profile, so the role and the
optional medico/paciente references can never disagree.
"""
from dataclasses import dataclass
from typing import ClassVar, Optional, Union
import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func

from ..database import Base


class UserRole(str, enum.Enum):
    """
    Enumeration for user roles in the clinic system.

    Roles:
    - ADMINISTRATIVE: Front-desk and management staff, manages user accounts
    - MEDICAL: Practitioners, optionally linked to a Medico profile
    - PATIENT: Patients, optionally linked to a Paciente profile
    """
    ADMINISTRATIVE = "Administrativo"
    MEDICAL = "Medico"
    PATIENT = "Paciente"

    @classmethod
    def values(cls):
        return [role.value for role in cls]


@dataclass(frozen=True)
class AdministrativeProfile:
    """Administrativo accounts never reference a medico or paciente."""
    role: ClassVar[UserRole] = UserRole.ADMINISTRATIVE

    @property
    def medico_id(self) -> None:
        return None

    @property
    def paciente_id(self) -> None:
        return None


@dataclass(frozen=True)
class MedicalProfile:
    role: ClassVar[UserRole] = UserRole.MEDICAL
    medico_id: Optional[int] = None

    @property
    def paciente_id(self) -> None:
        return None


@dataclass(frozen=True)
class PatientProfile:
    role: ClassVar[UserRole] = UserRole.PATIENT
    paciente_id: Optional[int] = None

    @property
    def medico_id(self) -> None:
        return None


RoleProfile = Union[AdministrativeProfile, MedicalProfile, PatientProfile]


def build_role_profile(
    role: UserRole,
    medico_id: Optional[int] = None,
    paciente_id: Optional[int] = None
) -> RoleProfile:
    """
    Build the role profile for a role and its optional references.

    Args:
        role: User role
        medico_id: Medico profile id (only valid for MEDICAL)
        paciente_id: Paciente profile id (only valid for PATIENT)

    Returns:
        RoleProfile: The matching profile variant

    Raises:
        ValueError: If a reference does not belong to the role
    """
    role = UserRole(role)
    if role == UserRole.ADMINISTRATIVE:
        if medico_id is not None or paciente_id is not None:
            raise ValueError("Administrativo users cannot reference a medico or paciente")
        return AdministrativeProfile()
    if role == UserRole.MEDICAL:
        if paciente_id is not None:
            raise ValueError("Medico users cannot reference a paciente")
        return MedicalProfile(medico_id=medico_id)
    if medico_id is not None:
        raise ValueError("Paciente users cannot reference a medico")
    return PatientProfile(paciente_id=paciente_id)


class User(Base):
    """
    User Model - Stores the identity record of every account

    Fields:
    - id: Primary key for user identification
    - username: Unique login identifier (email or username)
    - password_hash: bcrypt hash (never store or return raw passwords)
    - role: User role (Administrativo, Medico, Paciente)
    - medico_id: Reference to the Medico profile (Medico accounts only)
    - paciente_id: Reference to the Paciente profile (Paciente accounts only)
    - created_at: Timestamp when user was created
    - updated_at: Timestamp when user was last updated
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False
    )
    medico_id = Column(Integer, ForeignKey("medicos.id", ondelete="SET NULL"), nullable=True)
    paciente_id = Column(Integer, ForeignKey("pacientes.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @classmethod
    def from_profile(cls, username: str, password_hash: str, profile: RoleProfile) -> "User":
        """Create an identity record whose references come from its role profile."""
        return cls(
            username=username,
            password_hash=password_hash,
            role=profile.role,
            medico_id=profile.medico_id,
            paciente_id=profile.paciente_id,
        )

    @property
    def profile(self) -> RoleProfile:
        """Role profile view of the stored role and references."""
        if self.role == UserRole.MEDICAL:
            return MedicalProfile(medico_id=self.medico_id)
        if self.role == UserRole.PATIENT:
            return PatientProfile(paciente_id=self.paciente_id)
        return AdministrativeProfile()

    def __repr__(self):
        """String representation of the User model"""
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
