import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import asc, desc
from fastapi import Request
from homestead.models.audit_log import AuditLog
from datetime import datetime

logger = logging.getLogger(__name__)


def request_context(request: Optional[Request]) -> dict:
    """Client and route details for an audit entry."""
    if request is None:
        return {}
    return {
        "ip_address": request.headers.get("x-forwarded-for")
        or (request.client.host if request.client else None),
        "user_agent": request.headers.get("user-agent"),
        "request_method": request.method,
        "request_path": request.url.path,
    }


class AuditLogService:
    """Central service for creating and querying audit logs"""

    def create_log(
        self,
        db: Session,
        action: str,
        resource_type: str,
        resource_id: Optional[int] = None,
        changes: Optional[dict] = None,
        status: str = "success",
        status_code: Optional[int] = None,
        error_message: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        request_method: Optional[str] = None,
        request_path: Optional[str] = None,
        duration_ms: Optional[int] = None,
    ) -> AuditLog:
        """Create an audit log entry"""
        log = AuditLog(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            changes=changes,
            status=status,
            status_code=status_code,
            error_message=error_message,
            ip_address=ip_address,
            user_agent=user_agent,
            request_method=request_method,
            request_path=request_path,
            duration_ms=duration_ms,
        )

        db.add(log)
        try:
            db.commit()
            db.refresh(log)
        except Exception:
            db.rollback()
            raise
        return log

    def record(
        self,
        db: Session,
        request: Optional[Request],
        action: str,
        resource_type: str,
        resource_id: Optional[int] = None,
        changes: Optional[dict] = None,
        status_code: int = 200,
    ) -> Optional[AuditLog]:
        """Log an admin mutation; a failed write is logged, never raised."""
        try:
            return self.create_log(
                db=db,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                changes=changes,
                status="success" if status_code < 400 else "failure",
                status_code=status_code,
                **request_context(request),
            )
        except Exception as e:
            logger.warning(f"Audit log for {action} failed: {e}")
            return None

    def get_logs(
        self,
        db: Session,
        resource_type: Optional[str] = None,
        resource_id: Optional[int] = None,
        action: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 100,
        skip: int = 0,
    ) -> List[AuditLog]:
        """Query audit logs with filters"""
        query = db.query(AuditLog)

        if resource_type is not None:
            query = query.filter(AuditLog.resource_type == resource_type)
        if resource_id is not None:
            query = query.filter(AuditLog.resource_id == resource_id)
        if action is not None:
            query = query.filter(AuditLog.action == action)
        if start_date is not None:
            query = query.filter(AuditLog.timestamp >= start_date)
        if end_date is not None:
            query = query.filter(AuditLog.timestamp <= end_date)

        return (
            query.order_by(desc(AuditLog.timestamp), desc(AuditLog.id))
            .offset(skip)
            .limit(max(1, min(limit, 1000)))
            .all()
        )

    def get_resource_history(
        self, db: Session, resource_type: str, resource_id: int
    ) -> List[AuditLog]:
        """Get complete change history for a resource"""
        return (
            db.query(AuditLog)
            .filter(
                AuditLog.resource_type == resource_type,
                AuditLog.resource_id == resource_id,
            )
            .order_by(asc(AuditLog.timestamp), asc(AuditLog.id))
            .all()
        )
