from sqlalchemy.orm import Session
from fastapi import Request
from typing import Optional, Dict, Any, List

from .audit_models import AuditLog


async def create_audit_log(
    db: Session,
    action: str,
    user_id: Optional[int] = None,
    request: Optional[Request] = None,
    details: Optional[Dict[str, Any]] = None,
    commit: bool = True
) -> AuditLog:
    """
    Creates an audit log entry.

    With commit=False the entry is only added to the session, so it is saved
    or rolled back together with the caller's own changes.

    Args:
        db: The database session.
        action: A string describing the action performed (e.g., 'USER_LOGIN', 'USER_DELETED').
        user_id: The ID of the user who performed the action (if applicable).
        request: The FastAPI request object to extract IP address (if available).
        details: A dictionary containing additional context. Never include passwords or hashes.
        commit: Commit right away (False to join the caller's transaction).

    Returns:
        The created AuditLog object.
    """
    ip_address = None
    if request and request.client:
        ip_address = request.client.host

    audit_entry = AuditLog(
        user_id=user_id,
        action=action,
        ip_address=ip_address,
        details=details
    )
    db.add(audit_entry)
    if commit:
        db.commit()
        db.refresh(audit_entry)
    return audit_entry


async def get_audit_logs(
    db: Session,
    user_id_filter: Optional[int] = None,
    limit: int = 100,
    offset: int = 0
) -> List[AuditLog]:
    """Return audit entries, newest first, optionally for a single user."""
    query = db.query(AuditLog)
    if user_id_filter is not None:
        query = query.filter(AuditLog.user_id == user_id_filter)
    return query.order_by(AuditLog.id.desc()).offset(offset).limit(limit).all()
