"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the student records service.
Controllers are intentionally thin: they parse requests, delegate to the
`StudentStore` or the `SummaryGenerator`, and translate their exceptions
into responses.

Endpoints implemented:
- POST /students
- GET /students
- GET /students/{student_id}
- PUT /students/{student_id}
- DELETE /students/{student_id}
- GET /students/{student_id}/summary
- GET /health

The store and summary generator are created by `create_app` and kept on
`app.state`; handlers receive them through dependencies so every app
instance (and every test) has its own state.
"""

from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from typing import List, Optional
import json
import logging
import time
import uuid

from .config import Settings, settings as default_settings
from .errors import StudentNotFoundError, StudentValidationError, SummaryError
from .schemas import Student, StudentIn, SummaryOut
from .store import StudentStore
from .summary import SummaryGenerator

logger = logging.getLogger("student_api.api")

NOT_FOUND_DETAIL = "Student not found"
INVALID_BODY_DETAIL = "Invalid request body"


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[StudentStore] = None,
    summarizer: Optional[SummaryGenerator] = None,
) -> FastAPI:
    """Build the application with its own store and summary generator."""
    settings = settings or default_settings
    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(title="Student Records API")
    app.state.settings = settings
    app.state.store = store if store is not None else StudentStore()
    app.state.summarizer = summarizer if summarizer is not None else SummaryGenerator.from_settings(settings)

    # Wide-open CORS keeps local HTML testers working without extra config in dev.
    if settings.ALLOW_DEV_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.middleware("http")(request_context_middleware)
    app.add_exception_handler(RequestValidationError, malformed_request_handler)
    _register_routes(app)
    return app


async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
                "client": request.client.host if request.client else "unknown",
            },
            ensure_ascii=True,
        ),
    )
    return response


async def malformed_request_handler(request: Request, exc: RequestValidationError):
    """Reject undecodable bodies with a plain-text 400 before any validation or store access."""
    return PlainTextResponse(INVALID_BODY_DETAIL, status_code=400)


def get_store(request: Request) -> StudentStore:
    """Return the store owned by the running application."""
    return request.app.state.store


def get_summarizer(request: Request) -> SummaryGenerator:
    return request.app.state.summarizer


def _path_id(raw: str) -> int:
    """Read a path id; text that is not an integer maps to 0, which is never issued."""
    try:
        return int(raw)
    except ValueError:
        return 0


def _validation_failed(exc: StudentValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=[e.model_dump() for e in exc.errors])


def _register_routes(app: FastAPI) -> None:

    @app.post('/students', status_code=201, response_model=Student)
    def create_student(payload: StudentIn, store: StudentStore = Depends(get_store)):
        """Create a student; any `id` in the body is ignored."""
        try:
            return store.create(payload)
        except StudentValidationError as e:
            return _validation_failed(e)

    @app.get('/students', response_model=List[Student])
    def list_students(store: StudentStore = Depends(get_store)):
        """List a snapshot of all students, ordered by id."""
        return store.list()

    @app.get('/students/{student_id}', response_model=Student)
    def get_student(student_id: str, store: StudentStore = Depends(get_store)):
        try:
            return store.get(_path_id(student_id))
        except StudentNotFoundError:
            raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)

    @app.put('/students/{student_id}', response_model=Student)
    def update_student(student_id: str, payload: StudentIn, store: StudentStore = Depends(get_store)):
        """Replace all fields of a student; the path id always wins."""
        try:
            return store.update(_path_id(student_id), payload)
        except StudentValidationError as e:
            return _validation_failed(e)
        except StudentNotFoundError:
            raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)

    @app.delete('/students/{student_id}', status_code=204)
    def delete_student(student_id: str, store: StudentStore = Depends(get_store)):
        try:
            store.delete(_path_id(student_id))
        except StudentNotFoundError:
            raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
        return Response(status_code=204)

    @app.get('/students/{student_id}/summary', response_model=SummaryOut)
    def student_summary(
        student_id: str,
        store: StudentStore = Depends(get_store),
        summarizer: SummaryGenerator = Depends(get_summarizer),
    ):
        """Ask the text-generation service for a short summary of a student.

        The student is looked up first; the store lock is released before
        the outbound call, so a slow service only delays this request.
        """
        try:
            student = store.get(_path_id(student_id))
        except StudentNotFoundError:
            raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
        try:
            text = summarizer.summarize(student)
        except SummaryError as e:
            logger.warning("summary failed for student id=%s: %s (%s)", student_id, type(e).__name__, e)
            raise HTTPException(status_code=e.status_code, detail=e.detail)
        return {"summary": text}

    @app.get("/health")
    def health(store: StudentStore = Depends(get_store)):
        """Lightweight health check for uptime monitoring."""
        return {"status": "ok", "students": len(store)}


app = create_app()
