import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from bloodhub.utils.request_info import client_info
from bloodhub.utils.logging_config import (
    LogContext,
    get_logger,
    log_api_access,
    log_security_event,
)
from bloodhub.utils.security import TokenManager

logger = get_logger(__name__)

SLOW_REQUEST_SECONDS = 1.0


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle request/response logging and context management
    """

    def __init__(self, app: FastAPI, log_requests: bool = True, log_responses: bool = True):
        super().__init__(app)
        self.log_requests = log_requests
        self.log_responses = log_responses

    @staticmethod
    def get_user_id(request: Request):
        """Best-effort caller id for log context; auth itself happens in dependencies"""
        auth_header = request.headers.get("authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return None
        try:
            payload = TokenManager.decode_token(auth_header.split(" ", 1)[1])
        except ValueError:
            return None
        return payload.get("sub")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        client_ip, user_agent = client_info(request)
        user_id = self.get_user_id(request)

        with LogContext(req_id=request_id, usr_id=user_id):
            start_time = time.time()

            if self.log_requests:
                logger.info(
                    f"Incoming request: {request.method} {request.url.path}",
                    extra={
                        "extra_fields": {
                            "http_method": request.method,
                            "path": str(request.url.path),
                            "query_params": dict(request.query_params),
                            "client_ip": client_ip,
                            "user_agent": user_agent,
                            "request_size_bytes": request.headers.get("content-length", 0),
                            "action": "request_received",
                        }
                    },
                )

            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"Request failed: {request.method} {request.url.path}",
                    extra={
                        "extra_fields": {
                            "http_method": request.method,
                            "path": str(request.url.path),
                            "error_type": type(e).__name__,
                            "error_message": str(e),
                            "response_time_seconds": round(time.time() - start_time, 4),
                            "client_ip": client_ip,
                            "action": "request_failed",
                        }
                    },
                    exc_info=True,
                )
                raise

            response_time = time.time() - start_time
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id

            if self.log_responses:
                log_method = logger.warning if response_time > SLOW_REQUEST_SECONDS else logger.info
                log_method(
                    f"Request completed: {request.method} {request.url.path} - {status_code}",
                    extra={
                        "extra_fields": {
                            "http_method": request.method,
                            "path": str(request.url.path),
                            "status_code": status_code,
                            "response_time_seconds": round(response_time, 4),
                            "client_ip": client_ip,
                            "slow_request": response_time > SLOW_REQUEST_SECONDS,
                            "action": "request_completed",
                        }
                    },
                )

            log_api_access(
                method=request.method,
                path=str(request.url.path),
                status_code=status_code,
                response_time=response_time,
                user_id=user_id,
                ip_address=client_ip,
            )

            if status_code in (401, 403) and "/auth/" not in request.url.path:
                log_security_event(
                    event_type="unauthorized_access_attempt",
                    user_id=user_id,
                    ip_address=client_ip,
                    user_agent=user_agent,
                    details={"path": str(request.url.path), "method": request.method},
                )

            return response


def setup_logging_middleware(app: FastAPI):
    """
    Set up logging middleware for the FastAPI application
    """
    app.add_middleware(LoggingMiddleware, log_requests=True, log_responses=True)
