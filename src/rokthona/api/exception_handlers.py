"""
Exception handlers that render every failure as ``{"message": ...}``.

Handlers:
    api_error_handler: domain errors raised by guards and services
    validation_error_handler: request bodies / parameters that fail schema validation (400)
    http_exception_handler: framework HTTP errors (unknown route, wrong method)
    aws_error_handler: boto3 failures not translated closer to the call
    unhandled_error_handler: anything else; logged with its traceback (500)
"""

import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rokthona.core.errors import ApiError, InvalidInput, UpstreamFailure

logger = logging.getLogger(__name__)


def _request_context(request: Request) -> dict:
    return {"method": request.method, "path": request.url.path}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Request failed: {exc.message}", extra=_request_context(request))
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=InvalidInput.status_code,
        content={"message": InvalidInput.default_message, "errors": jsonable_encoder(exc.errors())},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def aws_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"AWS call failed: {exc}", extra=_request_context(request))
    return JSONResponse(
        status_code=UpstreamFailure.status_code,
        content={"message": UpstreamFailure.default_message},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled {type(exc).__name__}: {exc}", extra=_request_context(request))
    return JSONResponse(
        status_code=UpstreamFailure.status_code,
        content={"message": UpstreamFailure.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ClientError, aws_error_handler)
    app.add_exception_handler(BotoCoreError, aws_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
