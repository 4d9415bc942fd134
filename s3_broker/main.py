from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status

from s3_broker.models.broker import EmptyResponse, ErrorResponse
from s3_broker.routes.bindings import router as bindings_router
from s3_broker.routes.catalog import router as catalog_router
from s3_broker.routes.service_instances import router as service_instances_router
from s3_broker.services.config import BrokerAuthConfig
from s3_broker.services.iam_service import IamServiceError
from s3_broker.services.plan import (
    ServiceInstanceBindingDoesNotExistError,
    ServiceInstanceDoesNotExistError,
    ServiceInstanceUpdateNotSupportedError,
)
from s3_broker.services.policy import BucketGroupPolicy
from s3_broker.services.s3_service import S3ServiceError


logger = logging.getLogger(__name__)


def _ensure_logging() -> None:
    formatter = logging.Formatter("%(levelname)s: %(message)s")
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    else:
        root.setLevel(logging.INFO)
        for handler in root.handlers:
            handler.setFormatter(formatter)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _ensure_logging()
    app.state.bucket_group_policy = BucketGroupPolicy.from_env()
    if not BrokerAuthConfig.from_env().enabled:
        logger.warning("SECURITY_USER_PASSWORD is not set; broker API is not authenticated")
    yield


app = FastAPI(lifespan=lifespan)

app.include_router(catalog_router)
app.include_router(service_instances_router)
app.include_router(bindings_router)


@app.exception_handler(S3ServiceError)
@app.exception_handler(IamServiceError)
async def aws_service_error_handler(request: Request, exc: RuntimeError) -> JSONResponse:
    """Map S3/IAM service-layer failures to a broker error response.

    The operation stopped at the failing step; whatever earlier steps created is
    left in place, so the platform sees the failure and may retry or clean up.

    Returns:
        502 Bad Gateway with a JSON body: {"description": "..."}
    """
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=ErrorResponse(description=str(exc)).model_dump(),
    )


@app.exception_handler(ServiceInstanceUpdateNotSupportedError)
async def update_not_supported_handler(request: Request, exc: ServiceInstanceUpdateNotSupportedError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(description=str(exc)).model_dump(),
    )


@app.exception_handler(ServiceInstanceDoesNotExistError)
async def instance_missing_handler(request: Request, exc: ServiceInstanceDoesNotExistError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(description=str(exc)).model_dump(),
    )


@app.exception_handler(ServiceInstanceBindingDoesNotExistError)
async def binding_missing_handler(request: Request, exc: ServiceInstanceBindingDoesNotExistError) -> JSONResponse:
    logger.info("%s", exc)
    return JSONResponse(status_code=status.HTTP_410_GONE, content=EmptyResponse().model_dump())
