"""FastAPI app entry point."""

import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import LOG_LEVEL
from .db import close_conn, get_conn
from .errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    get_conn()
    logger.info("healstats store opened")
    yield
    close_conn()


app = FastAPI(title="Healstats", lifespan=lifespan)

from .api import router as api_router

app.include_router(api_router)


@app.exception_handler(InvalidInputError)
async def invalid_input(request: Request, exc: InvalidInputError):
    logger.warning("rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": "invalid_input", "detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def invalid_params(request: Request, exc: RequestValidationError):
    detail = "; ".join(
        f"{'.'.join(str(p) for p in e['loc'][1:])}: {e['msg']}" for e in exc.errors()
    )
    logger.warning("rejected %s: %s", request.url.path, detail)
    return JSONResponse(status_code=400, content={"error": "invalid_input", "detail": detail})


@app.exception_handler(NotFoundError)
async def not_found(request: Request, exc: NotFoundError):
    logger.warning("not found %s: %s", request.url.path, exc)
    return JSONResponse(status_code=404, content={"error": "not_found", "detail": str(exc)})


@app.exception_handler(sqlite3.DatabaseError)
async def store_unavailable(request: Request, exc: sqlite3.DatabaseError):
    logger.error("store error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"error": "store_unavailable", "detail": str(exc)})


@app.get("/health")
async def health():
    return {"status": "ok"}
