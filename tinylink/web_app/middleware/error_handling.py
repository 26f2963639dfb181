"""
Error handling for consistent error responses.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from ...common.logging_config import get_logger
from ...errors import RegistryError

logger = get_logger("web.errors")


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    """
    Convert a RegistryError into a JSON response with its status code.

    Args:
        request: The incoming HTTP request
        exc: The registry error raised by a route

    Returns:
        JSON body {"error": message} plus details when present
    """
    if exc.status_code >= 500:
        logger.error(f"Registry error in {request.url.path}: {exc.message}")
    else:
        logger.warning(f"Registry error in {request.url.path}: {exc.message}")

    body = {"error": exc.message}
    if exc.details:
        body["details"] = exc.details
    return JSONResponse(content=body, status_code=exc.status_code)
