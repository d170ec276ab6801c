import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from app.core.config import LOG_LEVEL, SESSION_SECRET_KEY
from app.core.errors import AuthorizationDenied, PolicyNotFound
from app.core.logging_middleware import LoggingMiddleware
from app.db.init_db import init_db

from app.routers.assignments import router as assignments_router
from app.routers.auth import router as auth_router
from app.routers.late_policies import router as late_policies_router
from app.routers.submissions import router as submissions_router

logging.basicConfig(level=LOG_LEVEL)

app = FastAPI(title="Late Policies")

# Middleware
app.add_middleware(LoggingMiddleware)
# flash messages live in the signed session cookie
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY, same_site="lax")


@app.exception_handler(AuthorizationDenied)
async def authorization_denied_handler(request: Request, exc: AuthorizationDenied):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": exc.detail})


@app.exception_handler(PolicyNotFound)
async def policy_not_found_handler(request: Request, exc: PolicyNotFound):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.detail})


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(late_policies_router, prefix="/late_policies", tags=["late_policies"])
app.include_router(assignments_router, tags=["assignments"])
app.include_router(submissions_router, tags=["submissions"])
