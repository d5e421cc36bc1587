import asyncio
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from fastapi import Request

from homestead.database import SessionLocal
from homestead.services.audit_log_service import AuditLogService, request_context

logger = logging.getLogger(__name__)

# Thread pool for executing blocking database operations
_executor = ThreadPoolExecutor(max_workers=5)

SKIPPED_PATHS = {"/healthy", "/docs", "/openapi.json", "/redoc"}


def _log_audit_sync(
    status: str,
    status_code: Optional[int],
    error_message: Optional[str],
    context: dict,
    duration_ms: int,
):
    """Write one ``http.request`` entry; runs in the thread pool.

    Audit logging must never break the request it describes, so failures
    are rolled back and logged at debug level.
    """
    db = SessionLocal()
    try:
        AuditLogService().create_log(
            db=db,
            action="http.request",
            resource_type="http",
            status=status,
            status_code=status_code,
            error_message=error_message,
            duration_ms=duration_ms,
            **context,
        )
    except Exception as e:
        db.rollback()
        logger.debug(f"Audit logging failed (non-critical): {e}")
    finally:
        db.close()


async def audit_log_middleware(request: Request, call_next):
    """Log every API request and its outcome without blocking the response.

    Disabled in the test environment.
    """
    if os.getenv("TESTING") == "true":
        return await call_next(request)

    if request.url.path in SKIPPED_PATHS:
        return await call_next(request)

    start_time = time.time()
    context = request_context(request)
    loop = asyncio.get_running_loop()

    try:
        response = await call_next(request)
    except Exception as exc:
        duration_ms = int((time.time() - start_time) * 1000)
        loop.run_in_executor(
            _executor,
            _log_audit_sync,
            "error",
            None,
            str(exc)[:1000],
            context,
            duration_ms,
        )
        raise

    status_code = getattr(response, "status_code", None)
    duration_ms = int((time.time() - start_time) * 1000)
    status = "success" if status_code and status_code < 400 else "failure"
    loop.run_in_executor(
        _executor,
        _log_audit_sync,
        status,
        status_code,
        None,
        context,
        duration_ms,
    )
    return response
