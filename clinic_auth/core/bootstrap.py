"""
Bootstrap utilities for first admin creation.
Handles automatic creation of the first Administrativo user from settings.
"""
import logging
from sqlalchemy.orm import Session
from ..auth.models import User, UserRole, AdministrativeProfile
from .security import hash_password
from ..config import settings

logger = logging.getLogger(__name__)


def admin_exists(db: Session) -> bool:
    """
    Check if any Administrativo user exists in the database.

    Args:
        db: Database session

    Returns:
        bool: True if at least one admin exists, False otherwise
    """
    admin_count = db.query(User).filter(User.role == UserRole.ADMINISTRATIVE).count()
    return admin_count > 0


def create_bootstrap_admin(db: Session) -> bool:
    """
    Create the first Administrativo user from settings.

    Args:
        db: Database session

    Returns:
        bool: True if admin was created successfully, False otherwise
    """
    try:
        if not settings.bootstrap_admin_username or not settings.bootstrap_admin_password:
            logger.warning("Bootstrap admin credentials not provided in environment variables")
            return False

        # Check if username already exists (safety check)
        existing_user = db.query(User).filter(User.username == settings.bootstrap_admin_username).first()
        if existing_user:
            logger.warning(f"Bootstrap failed: Username {settings.bootstrap_admin_username} already exists")
            return False

        bootstrap_admin = User.from_profile(
            settings.bootstrap_admin_username,
            hash_password(settings.bootstrap_admin_password),
            AdministrativeProfile()
        )

        db.add(bootstrap_admin)
        db.commit()
        db.refresh(bootstrap_admin)

        logger.info(f"Bootstrap admin created successfully: {bootstrap_admin.username} (ID: {bootstrap_admin.id})")
        return True

    except Exception as e:
        logger.error(f"Failed to create bootstrap admin: {str(e)}")
        db.rollback()
        return False


def bootstrap_admin_if_needed(db: Session) -> None:
    """
    Check if an admin exists and create the bootstrap admin if needed.
    This function should be called during application startup.

    Args:
        db: Database session
    """
    logger.info("Checking for existing Administrativo users...")

    if admin_exists(db):
        logger.info("Administrativo users found. Bootstrap not needed.")
        return

    logger.info("No Administrativo users found. Attempting bootstrap admin creation...")

    if create_bootstrap_admin(db):
        logger.info("Bootstrap admin creation completed successfully")
    else:
        logger.warning("Bootstrap admin creation skipped.")
        logger.info("To create the first admin, set BOOTSTRAP_ADMIN_USERNAME and BOOTSTRAP_ADMIN_PASSWORD in your .env file.")
