"""FastAPI application for PromptPay payload generation."""
from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .logging_conf import configure_logging
from .middleware import RequestLoggingMiddleware, route_path
from .monitoring import metrics_payload, record_service_error
from .schemas import (
    AccountTypeEnum,
    GeneratePromptPayRequest,
    GeneratePromptPayResponse,
    VerifyPayloadRequest,
    VerifyPayloadResponse,
)
from .services.errors import ServiceError
from .services.generator import PromptPayGenerator
from .services.verifier import PayloadVerifier

app = FastAPI(title="promptpay", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)

logger = logging.getLogger("promptpay.api")

_HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "ERR_UNAUTHORIZED",
    status.HTTP_404_NOT_FOUND: "ERR_NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "ERR_METHOD_NOT_ALLOWED",
}


def _warn_insecure_defaults() -> None:
    if settings.api_key == "dev-secret-key":
        logger.warning(
            "api key is using the default value",
            extra={"config_key": "api_key"},
        )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    _warn_insecure_defaults()


async def require_api_key(x_api_key: str = Header(...)) -> None:
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    path = route_path(request)
    logger.warning(
        "service error",
        extra={"code": exc.code, "path": path, "method": request.method},
    )
    record_service_error(exc.code, path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_ERROR_CODES.get(exc.status_code, f"ERR_HTTP_{exc.status_code}")
    path = route_path(request)
    logger.warning("http error", extra={"code": code, "path": path, "method": request.method})
    record_service_error(code, path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": code, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    path = route_path(request)
    logger.warning("request validation error", extra={"code": "ERR_VALIDATION", "path": path, "method": request.method})
    record_service_error("ERR_VALIDATION", path)
    return JSONResponse(status_code=422, content={"code": "ERR_VALIDATION", "message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled exception",
        extra={"path": route_path(request), "method": request.method},
    )
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/promptpay", response_model=GeneratePromptPayResponse, tags=["promptpay"], dependencies=[Depends(require_api_key)])
async def generate_promptpay(payload: GeneratePromptPayRequest) -> GeneratePromptPayResponse:
    generator = PromptPayGenerator(route="/v1/promptpay")
    result = generator.create_payload(
        target=payload.target,
        amount=payload.amount,
        include_image=payload.include_image,
        image_size=payload.image_size,
    )
    request = result.request

    return GeneratePromptPayResponse(
        payload=result.encoded.payload,
        crc=result.encoded.crc,
        account_type=AccountTypeEnum(request.account_type.name),
        account_number=request.account_number,
        amount=request.amount_text,
        qr_png_base64=result.qr_png_base64,
        image_error=result.image_error.code if result.image_error else None,
    )


@app.post("/v1/promptpay/verify", response_model=VerifyPayloadResponse, tags=["promptpay"], dependencies=[Depends(require_api_key)])
async def verify_promptpay(payload: VerifyPayloadRequest) -> VerifyPayloadResponse:
    result = PayloadVerifier().verify(payload.payload)

    return VerifyPayloadResponse(
        valid=result.valid,
        crc=result.crc,
        expected_crc=result.expected_crc,
        account_type=AccountTypeEnum(result.account_type.name) if result.account_type else None,
        account_number=result.account_number,
        amount=result.amount,
        fields=result.fields,
    )
