import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from stockledger.api.routes import api_router
from stockledger.core.config import get_settings
from stockledger.core.errors import StockLedgerError
from stockledger.core.logging_config import RequestLoggingMiddleware, get_logger, setup_logging
from stockledger.db.base import Base
from stockledger.db.session import SessionLocal, engine
from stockledger.services.seed import seed_initial_data


settings = get_settings()
setup_logging(
    service_name="stockledger",
    level=settings.log_level,
    json_logs=settings.log_json,
    environment=settings.environment,
)
logger = get_logger(__name__)


def create_schema() -> None:
    retries = settings.db_connect_retries
    while retries > 0:
        try:
            Base.metadata.create_all(bind=engine)
            break
        except OperationalError:
            retries -= 1
            if retries == 0:
                raise
            logger.warning("Database not reachable, retrying", extra={"extra_fields": {"retries_left": retries}})
            time.sleep(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.app_name}")
    create_schema()

    db = SessionLocal()
    try:
        seed_initial_data(db, demo_products=settings.seed_demo_data)
    finally:
        db.close()

    yield
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(StockLedgerError)
async def stock_ledger_error_handler(_: Request, exc: StockLedgerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/")
def root() -> dict:
    return {
        "name": "Stock Ledger API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
def health() -> JSONResponse:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        database = "pass"
    except SQLAlchemyError as exc:
        logger.error(f"Database health check failed: {exc}")
        database = "fail"
    finally:
        db.close()

    healthy = database == "pass"
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "pass" if healthy else "fail", "checks": {"database": database}},
    )


app.include_router(api_router, prefix=settings.api_v1_prefix)
