"""Exception handlers that turn domain errors into safe HTTP responses.

Only a message string crosses the boundary; anything unexpected is logged
with its traceback and reported as a generic 500.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from marketplace.domain import logger
from marketplace.shared.errors import NotPermittedError, StaleTransitionError


async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": exc.messages})


async def not_found_handler(request: Request, exc: ObjectNotFoundError):
    return JSONResponse(status_code=404, content={"error": "Not found"})


async def not_permitted_handler(request: Request, exc: NotPermittedError):
    return JSONResponse(status_code=403, content={"error": exc.message})


async def stale_transition_handler(request: Request, exc: StaleTransitionError):
    return JSONResponse(status_code=409, content={"error": exc.message, "order_id": exc.order_id})


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"error": "Something went wrong, please try again"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(NotPermittedError, not_permitted_handler)
    app.add_exception_handler(StaleTransitionError, stale_transition_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
