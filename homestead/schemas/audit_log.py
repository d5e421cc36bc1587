from pydantic import BaseModel, ConfigDict
from typing import Any, Optional
from datetime import datetime


class AuditLogResponse(BaseModel):
    id: int
    action: str
    resource_type: str
    resource_id: Optional[int] = None
    changes: Optional[dict[str, Any]] = None
    status: str
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    ip_address: Optional[str] = None
    request_method: Optional[str] = None
    request_path: Optional[str] = None
    duration_ms: Optional[int] = None
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
