"""
Custom middleware for monitoring and error handling.
"""
import time
import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from crudgen.core.exceptions import DataGenerationError, OperationNotFoundError, SpecParseError
from crudgen.core.monitoring import record_http_request

logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 1.0


class MonitoringMiddleware(BaseHTTPMiddleware):
    """Middleware for request monitoring."""
    
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time
        
        # Route templates keep label cardinality bounded
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        record_http_request(request.method, endpoint, response.status_code, duration)
        
        if duration > SLOW_REQUEST_SECONDS:
            # Oracle round trips dominate generation time
            logger.warning(
                f"Slow request: {request.method} {endpoint} took {duration:.2f}s"
            )
        
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn generator errors that escaped an endpoint into JSON responses."""
    
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except DataGenerationError as e:
            logger.error(f"Test data generation failed: {e}")
            return JSONResponse(
                status_code=422,
                content={"detail": {"message": str(e), "operation": e.operation, "violations": e.violations}},
            )
        except OperationNotFoundError as e:
            return JSONResponse(status_code=404, content={"detail": str(e)})
        except SpecParseError as e:
            return JSONResponse(status_code=400, content={"detail": str(e)})
        except Exception as e:
            logger.error(
                f"Unhandled error: {str(e)}",
                exc_info=True
            )
            # Re-raise to let FastAPI handle it
            raise
