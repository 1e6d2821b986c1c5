# api/main.py
from typing import Optional
from fastapi import FastAPI, Depends, Query, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings, configure_logging
from core.errors import LibraryError
from core.sa.database import get_database
from core.session_gate import SessionGate, View
from api.deps import get_session_gate
from api.routes import books, catalog, categories, circulation, feedback, members, reports

configure_logging()

app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_STATUS = {
    "not_found": 404,
    "conflict": 409,
    "invalid_argument": 400,
    "permission_denied": 403,
    "transient": 503,
}

@app.exception_handler(LibraryError)
async def library_error_handler(request: Request, exc: LibraryError):
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.kind, 500),
        content={"detail": exc.message, "error": exc.kind},
    )

# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    get_database().init_db()

@app.get("/")
async def root():
    return {"name": settings.app_name, "version": settings.app_version, "status": "ok"}

@app.get("/session")
def get_session(
    requested: Optional[View] = Query(None, description="View the client asked for"),
    gate: SessionGate = Depends(get_session_gate)
):
    """Which view the caller lands on with the key it presented"""
    return {"authenticated": gate.is_authenticated(), "view": gate.current_view(requested).value}

app.include_router(catalog.router)
app.include_router(books.router)
app.include_router(members.router)
app.include_router(categories.router)
app.include_router(circulation.router)
app.include_router(reports.router)
app.include_router(feedback.router)
