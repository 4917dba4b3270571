"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List, Optional

# Placeholder secrets that must never sign production tokens
INSECURE_SECRET_KEYS = {
    "dev_jwt_secret",
    "secret",
    "changeme",
    "your-super-secret-jwt-key-change-in-production",
}


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string
        secret_key: Secret key for JWT token encoding (required, no fallback)
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Access token and session lifetime in minutes
        bcrypt_rounds: Cost factor for password hashing

        # Session settings
        session_cookie_name: Name of the cookie carrying the opaque session id
        session_cookie_secure: Whether the session cookie is HTTPS-only

        # CORS settings
        cors_origins: Origins allowed to call the API with credentials

        # Bootstrap admin settings (optional)
        bootstrap_admin_username: Optional login identifier for the first Administrativo user
        bootstrap_admin_password: Optional password for the first Administrativo user
    """
    # Database settings
    database_url: str

    # JWT settings
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Password hashing
    bcrypt_rounds: int = 10

    # Session settings
    session_cookie_name: str = "clinic_session"
    session_cookie_secure: bool = False

    # CORS settings
    cors_origins: List[str] = ["http://localhost:3000"]

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_username: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

    @field_validator("secret_key")
    @classmethod
    def secret_key_must_be_set(cls, value: str) -> str:
        """Reject empty or well-known placeholder signing secrets."""
        if not value or not value.strip():
            raise ValueError("SECRET_KEY must be set")
        if value.strip().lower() in INSECURE_SECRET_KEYS:
            raise ValueError("SECRET_KEY uses an insecure development placeholder")
        return value

    @field_validator("bcrypt_rounds")
    @classmethod
    def bcrypt_rounds_in_range(cls, value: int) -> int:
        # passlib accepts bcrypt costs between 4 and 31
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return value


# Create settings instance
settings = Settings()
