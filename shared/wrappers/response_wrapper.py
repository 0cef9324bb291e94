import json
import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse
from fastapi import Request

from shared.helpers.json_response_helper import failure_payload
from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)

WRAPPED_KEYS = {"status", "status_code", "message"}


def _is_wrapped(data) -> bool:
    return isinstance(data, dict) and WRAPPED_KEYS.issubset(data.keys())


class JsonResponseMiddleware(BaseHTTPMiddleware):
    """Wrap every JSON body in the ``JsonOutResult`` envelope."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Skip docs/openapi endpoints
        if request.url.path.startswith(("/openapi", "/docs", "/redoc")):
            return await call_next(request)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
            return JSONResponse(
                content=failure_payload("Internal server error", AppStatusCode.OPERATION_FAILED),
                status_code=500,
            )

        if "application/json" not in response.headers.get("content-type", ""):
            return response

        # Read the full body
        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        headers = {k: v for k, v in response.headers.items()
                   if k.lower() != "content-length"}

        try:
            data = json.loads(body_bytes.decode("utf-8")) if body_bytes else None
        except ValueError:
            data = None

        if _is_wrapped(data):
            return JSONResponse(content=data, status_code=response.status_code, headers=headers)

        if not (200 <= response.status_code < 400):
            message = data.get("detail") if isinstance(data, dict) else None
            wrapped = failure_payload(
                message=str(message or "An unexpected error occurred"),
                status_code=str(response.status_code),
            )
            return JSONResponse(content=wrapped, status_code=response.status_code, headers=headers)

        wrapped = JsonOutResult(
            data=data,
            status="Success",
            status_code=AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY,
            message="Data retrieved successfully"
        ).model_dump()

        return JSONResponse(content=wrapped, status_code=response.status_code, headers=headers)
