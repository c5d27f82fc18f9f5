from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from datetime import datetime, timezone
import time
import logging

logger = logging.getLogger(__name__)

class FrontendHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that logs every request and adds timing headers for the frontend
    """

    def __init__(self, app, api_version: str = "1.0.0"):
        super().__init__(app)
        self.api_version = api_version

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        client_ip = request.client.host if request.client else "unknown"
        logger.info(f"{request.method} {request.url.path} from {client_ip}")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled exception in {request.url.path}: {type(e).__name__}: {e}")
            raise

        process_time = time.time() - start_time

        if response.status_code >= 500:
            logger.error(f"   ERROR Response: {response.status_code} in {process_time:.3f}s")
        elif response.status_code >= 400:
            logger.warning(f"   WARNING Response: {response.status_code} in {process_time:.3f}s")
        else:
            logger.info(f"   SUCCESS Response: {response.status_code} in {process_time:.3f}s")

        response.headers["X-API-Version"] = self.api_version
        response.headers["X-Process-Time"] = str(round(process_time, 3))
        response.headers["X-Timestamp"] = datetime.now(timezone.utc).isoformat()

        return response
