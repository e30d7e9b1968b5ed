"""Request-scoped access to the application context."""

from fastapi import HTTPException, Request

from ..context import AppContext
from ..services.error_handler import ConfigurationError, IdeNotFoundError


def get_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(status_code=503, detail="Service is not initialized")
    return context


def config_error_to_http(error: ConfigurationError) -> HTTPException:
    """404 for unknown IDEs, 400 for everything else."""
    status = 404 if isinstance(error, IdeNotFoundError) else 400
    return HTTPException(status_code=status, detail={"message": error.message, "error_code": error.error_code})
