"""
FastAPI application entrypoint. Run with: uvicorn taskboard.main:app --reload --port 8000

Routes are mounted under /api:
  - Auth:   POST /api/auth/login, POST /api/auth/register, POST /api/auth/logout, GET /api/auth/me
  - Tasks:  GET/POST /api/tasks, GET/PUT/DELETE /api/tasks/{id}, POST/DELETE /api/tasks/{id}/share,
            GET/PUT /api/tasks/{id}/progress, PUT /api/tasks/{id}/grade
  - Announcements: GET/POST /api/announcements, PUT/DELETE /api/announcements/{id}
  - Events: GET/POST /api/events (?start&end), GET/PUT/DELETE /api/events/{id}
  - Users:  GET/POST /api/users, PUT /api/users/{id}
  - Classes: GET/POST /api/classes, GET/PUT/DELETE /api/classes/{id}, POST/DELETE /api/classes/{id}/students

Every error is rendered as {"success": false, "message": ...} with the status code carrying the error class.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.config import settings, DEFAULT_SECRET_KEY
from taskboard.api.auth import router as auth_router
from taskboard.api.tasks import router as tasks_router
from taskboard.api.announcements import router as announcements_router
from taskboard.api.events import router as events_router
from taskboard.api.users import router as users_router
from taskboard.api.classes import router as classes_router

logger = logging.getLogger("taskboard.main")

app = FastAPI(
    title="Taskboard API",
    description="Tasks, announcements and calendar for students, teachers and admins.",
    version="0.1.0",
)

_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins if _origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(tasks_router)
app.include_router(announcements_router)
app.include_router(events_router)
app.include_router(users_router)
app.include_router(classes_router)


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message}, headers=headers)


def format_validation_errors(errors) -> str:
    """'Invalid request: title: Field required; dueDate: Input should be a valid date'."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {err.get('msg', 'invalid')}")
    return "Invalid request: " + "; ".join(parts)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed fields are a 400 (not FastAPI's default 422)."""
    message = format_validation_errors(exc.errors())
    logger.debug("%s %s: %s", request.method, request.url.path, message)
    return _error(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    message = "Internal server error"
    if settings.debug:
        message = f"Internal server error: {type(exc).__name__}: {exc}"
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


@app.on_event("startup")
def startup():
    """Init DB and seed demo users. Fail fast if production uses the default SECRET_KEY or demo passwords."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if settings.is_production:
        if (settings.secret_key or "").strip() == DEFAULT_SECRET_KEY:
            logger.critical("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
            raise RuntimeError("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
        if settings.allow_demo_passwords:
            logger.critical("ALLOW_DEMO_PASSWORDS must be false in production.")
            raise RuntimeError("ALLOW_DEMO_PASSWORDS must be false in production.")
    elif settings.allow_demo_passwords:
        logger.warning("Demo passwords are enabled (admin123 / student123 / enseignant123 log in as any user).")
    from taskboard.database import init_db
    init_db()
    logger.info("Taskboard API ready (database: %s)", settings.database_url.split("@")[-1])


@app.get("/health")
def health():
    """Health check (JSON)."""
    return {"status": "ok", "message": "Taskboard API"}
