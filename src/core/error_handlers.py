"""전역 예외 핸들러.

AppException 계열 예외와 FastAPI 요청 검증 에러를 잡아
일관된 JSON 응답으로 변환한다. main.py에서 app.add_exception_handler()로 등록한다.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from core.exceptions import AppException, ValidationFailed


def _error_response(status_code: int, error_code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "error": message,
        },
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} | {exc.error_code}: {exc.message}")
    return _error_response(exc.status_code, exc.error_code, exc.message)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """pydantic/폼 검증 실패 → 422 대신 400 VALIDATION_ERROR."""
    fields = [".".join(str(p) for p in err.get("loc", ())[1:]) for err in exc.errors()]
    fields = [f for f in fields if f]
    message = ValidationFailed.message
    if fields:
        message = f"{message}: {', '.join(fields)}"
    return _error_response(ValidationFailed.status_code, ValidationFailed.error_code, message)
