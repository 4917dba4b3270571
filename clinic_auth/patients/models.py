"""
Paciente Model - Stores patient demographic information.

A Paciente is created before the identity record that references it,
during public self-registration.
"""
from sqlalchemy import Column, Integer, String, DateTime, func
from ..database import Base


class Paciente(Base):
    """
    Paciente Model - Stores patient demographic information

    Fields:
    - id: Primary key for the patient profile
    - dni: National identity document number (unique)
    - nombre: First name
    - apellido: Last name
    - edad: Age in years
    - sexo: Sex
    - obra_social: Health insurance provider
    - nro_afiliado: Member number within the health insurance provider
    - created_at: When the patient profile was created
    """
    __tablename__ = "pacientes"

    id = Column(Integer, primary_key=True, index=True)
    dni = Column(String, unique=True, index=True, nullable=False)
    nombre = Column(String, nullable=False)
    apellido = Column(String, nullable=False)
    edad = Column(Integer, nullable=False)
    sexo = Column(String, nullable=False)
    obra_social = Column(String, nullable=False)
    nro_afiliado = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        """String representation of the Paciente model"""
        return f"<Paciente(id={self.id}, dni='{self.dni}')>"

