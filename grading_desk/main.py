import logging

from fastapi import FastAPI

from grading_desk.core.logging_middleware import LoggingMiddleware
from grading_desk.db.init_db import init_db
from grading_desk.routers.homeworks import router as homeworks_router
from grading_desk.routers.submissions import router as submissions_router

logging.basicConfig(level=logging.INFO)
# httpx logs every request at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)

app = FastAPI(title="Grading Desk")

# Middleware
app.add_middleware(LoggingMiddleware)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(submissions_router, prefix="/api/submissions", tags=["submissions"])
app.include_router(homeworks_router, prefix="/api/homeworks", tags=["homeworks"])
