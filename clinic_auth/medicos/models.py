"""
Medico Model - Stores the professional profile a Medico account points to.
"""
from sqlalchemy import Column, Integer, String, DateTime, func
from ..database import Base


class Medico(Base):
    """
    Medico Model - Stores practitioner information

    Fields:
    - id: Primary key for the medico profile
    - nombre: First name
    - apellido: Last name
    - especialidad: Medical specialization
    - matricula: Professional license number (unique)
    - created_at: When the medico profile was created
    """
    __tablename__ = "medicos"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String, nullable=False)
    apellido = Column(String, nullable=False)
    especialidad = Column(String, nullable=True)
    matricula = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        """String representation of the Medico model"""
        return f"<Medico(id={self.id}, matricula='{self.matricula}')>"
