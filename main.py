import logging
import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from errors import InvalidTokenError, LedgerError

# Routers
from routers.auth import router as auth_router
from routers.health import router as health_router
from routers.scores import router as scores_router
from routers.songs import router as songs_router
from security import AUTH_COOKIE

logger = logging.getLogger("score-ledger")
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

app = FastAPI(title="Piano Practice – Score Ledger API")

_env_origins = os.getenv("CORS_ORIGINS", "").strip()
_origins = [o.strip() for o in _env_origins.split(",") if o.strip()] or [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
]

# Credentials are required: the auth token travels in a cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    response = _error(exc.status_code, exc.message)
    if isinstance(exc, InvalidTokenError) and request.cookies.get(AUTH_COOKIE):
        response.delete_cookie(AUTH_COOKIE, path="/")
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return _error(400, "Validation error")
    first = errors[0]
    # loc looks like ("body", "accuracy") or ("query", "limit"); model-level errors stop at "body"
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    message = first.get("msg", "Validation error")
    return _error(400, f"{field}: {message}" if field else message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("storage failure on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(auth_router)  # /api/auth/...
app.include_router(scores_router)  # /api/scores/...
app.include_router(songs_router)  # /api/songs/...
app.include_router(health_router)  # /api/health/...


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
