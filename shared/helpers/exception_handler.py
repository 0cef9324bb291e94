import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from shared.core.exceptions import InventoryLedgerError
from shared.helpers.json_response_helper import failure_payload
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(InventoryLedgerError)
    async def ledger_exception_handler(request: Request, exc: InventoryLedgerError):
        wrapped = failure_payload(
            message=exc.message,
            status_code=exc.code,
            data=exc.details or None,
        )
        return JSONResponse(content=wrapped, status_code=exc.http_status)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # error_response() already puts a wrapped payload in detail
        if isinstance(exc.detail, dict) and "status_code" in exc.detail:
            wrapped = exc.detail
        else:
            wrapped = failure_payload(
                message=str(exc.detail),
                status_code=str(exc.status_code or AppStatusCode.OPERATION_FAILED),
            )
        return JSONResponse(content=wrapped, status_code=exc.status_code or 400,
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        wrapped = failure_payload(
            message="Invalid request",
            status_code=AppStatusCode.INVALID_INPUT,
            data=[{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()],
        )
        return JSONResponse(content=wrapped, status_code=422)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

        wrapped = failure_payload(
            message="Internal server error",
            status_code=AppStatusCode.OPERATION_FAILED,
        )
        return JSONResponse(content=wrapped, status_code=500)
