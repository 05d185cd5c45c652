"""FastAPI app initialization, exception handling"""

import asyncio
import logging
import traceback
from contextlib import asynccontextmanager, suppress

from cardhub.config import Config, get_config
from cardhub.errors.base import ApplicationError
from cardhub.routes.card_production_batch import card_production_batch_router
from cardhub.routes.card_template import card_template_router
from cardhub.routes.company import company_router
from cardhub.routes.member import member_router
from cardhub.routes.member_card import member_card_router
from cardhub.routes.token import token_router
from cardhub.tasks.card_expiry import schedule_card_expiry
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

config: Config = get_config()
if not config.secret_key:
    raise ValueError(
        "CARDHUB_SECRET_KEY is missing in the configuration. "
        "Please set a valid secret key."
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    expiry_task = None
    if config.card_expiry_job_enabled:
        logger.info("Scheduling daily card expiry job")
        expiry_task = asyncio.create_task(schedule_card_expiry())
    yield
    if expiry_task is not None:
        expiry_task.cancel()
        with suppress(asyncio.CancelledError):
            await expiry_task


app = FastAPI(title=config.app_name, version=config.app_version, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ResponseValidationError)
async def response_validation_exception_handler(
    request: Request, exc: ResponseValidationError
):
    logger.error("Response validation error: %s", exc.errors())
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error_code": 1500,
            "error": "Response validation error encountered",
        },
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error_code": 1400,
            "error": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(ApplicationError)
def application_exception_handler(request: Request, exc: ApplicationError):
    c = {
        "success": False,
        "error_code": exc.error_code,
        "error": exc.error,
        "where": exc.where,
    }
    logger.error(c)
    # Only print full traceback when in debug logging
    if logger.isEnabledFor(logging.DEBUG):
        traceback.print_exception(exc)
    return JSONResponse(status_code=exc.http_code or 500, content=c)


@app.exception_handler(SQLAlchemyError)
def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        "Database error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "error_code": 1500, "error": "Internal error"},
    )


app.include_router(token_router)
app.include_router(company_router)
app.include_router(member_router)
app.include_router(card_template_router)
app.include_router(member_card_router)
app.include_router(card_production_batch_router)
