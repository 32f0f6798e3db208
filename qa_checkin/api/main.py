"""
FastAPI transport for the record store: submit answers, check out, list records.
"""

import os
from contextlib import asynccontextmanager
from typing import List, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .schemas import (
    AnswerResponse,
    CheckoutResponse,
    HealthResponse,
    StatusResponse,
    StoreAnswersRequest,
)
from ..core.config import VERSION, debug_enabled, get_db_path, get_static_dir
from ..core.dao import RecordStore
from ..core.db import Database
from ..core.errors import InternalStoreError, RecordNotFoundError
from ..core.schema import Entry, now_rfc3339
from ..util.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the process-wide store unless one was injected."""
    owned_db = None
    if getattr(app.state, "store", None) is None:
        owned_db = Database(get_db_path())
        owned_db.init_db()
        app.state.store = RecordStore(owned_db)
        logger.info(f"Q&A check-in service started with database {owned_db.path}")
    yield
    if owned_db is not None:
        owned_db.close()
        app.state.store = None


def get_store(request: Request) -> RecordStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=500, detail="Record store is not initialized")
    return store


def store_answers(body: StoreAnswersRequest, store: RecordStore = Depends(get_store)):
    """Append the submitted answers to the caller's record, creating it on first visit."""
    entries = [
        Entry(uuid=qa.uuid or str(uuid4()), question=qa.question, answer=qa.answer)
        for qa in body.qa_list
    ]
    try:
        store.append_or_create(body.tel_number, entries)
    except InternalStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return StatusResponse(status="OK")


def update_checkout(tel_number: str, uuid: str, store: RecordStore = Depends(get_store)):
    """Stamp the record with the current time as its checkout."""
    checkout_time = now_rfc3339()
    try:
        store.mark_checkout(tel_number, uuid, checkout_time)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Record not found")
    except InternalStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return CheckoutResponse(status="Checkout time updated", checkout=checkout_time)


def get_all_answers(store: RecordStore = Depends(get_store)):
    try:
        records = store.list_all()
    except InternalStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return [AnswerResponse(**record.to_dict()) for record in records]


def health_check_endpoint(request: Request):
    """Check system health; reports unhealthy rather than failing."""
    store = getattr(request.app.state, "store", None)
    db_health = store is not None and store.db.health_check()
    record_count = 0
    if db_health:
        try:
            record_count = store.count_records()
        except InternalStoreError as e:
            logger.warning(f"Record count unavailable: {e}")
            db_health = False

    return HealthResponse(
        status="healthy" if db_health else "unhealthy",
        version=VERSION,
        db_health=db_health,
        record_count=record_count,
    )


def create_app(store: Optional[RecordStore] = None, static_dir: Optional[str] = None) -> FastAPI:
    """Build the application, optionally around an already opened store."""
    app = FastAPI(
        title="Q&A Check-in API",
        version=VERSION,
        description="Guest question/answer sessions keyed by phone number",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url="/redoc" if debug_enabled() else None,
        lifespan=lifespan,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            logger.log_request(request.method, request.url.path, response.status_code)
        return response

    app.add_api_route("/health", health_check_endpoint, methods=["GET"], response_model=HealthResponse)
    app.add_api_route("/api/store_answers", store_answers, methods=["POST"], response_model=StatusResponse)
    app.add_api_route("/api/update_checkout/{tel_number}/{uuid}", update_checkout,
                      methods=["PUT"], response_model=CheckoutResponse)
    app.add_api_route("/api/get_all_answers", get_all_answers, methods=["GET"],
                      response_model=List[AnswerResponse], response_model_exclude_none=True)

    # Frontend bundle, mounted last so the API routes match first
    static_dir = static_dir or get_static_dir()
    if os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="frontend")
    else:
        logger.debug(f"Static directory {static_dir} not found; frontend not served")

    return app


app = create_app()
