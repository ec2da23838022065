from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from meowpair.db.base import get_db
from meowpair.core.config import settings
from meowpair.core.logging import configure_logging
from meowpair.routers import activity as activity_router
from meowpair.routers import cat_session as cat_session_router
from meowpair.routers import marketplace as marketplace_router
from meowpair.routers import notifications as notifications_router
from meowpair.routers import wallet_connection as wallet_connection_router
from meowpair.core.errors import (
    AppException,
    app_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="meowpair API",
    description=(
        "**Raise a cat together.**\n\n"
        "Owners and partners feed, cuddle and love a shared virtual cat; "
        "every action is logged and moves the cat's love, hunger and happiness.\n\n"
        "All endpoints except `/health` take `Authorization: Bearer <token>`.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(cat_session_router.router)
app.include_router(activity_router.router)
app.include_router(wallet_connection_router.router)
app.include_router(notifications_router.router)
app.include_router(marketplace_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
