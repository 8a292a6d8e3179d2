import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from database.db import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# quiet client library debug logs
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("fontTools").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import config, dashboard, grades, reports, students, subjects

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ latency header + access log (X-Latency-Ms)
app.add_middleware(TimingMiddleware)

# ✅ JSON error envelope for every failure class
add_error_handlers(app)

# ✅ /v1 prefixed routers
app.include_router(config.router,     prefix="/v1")
app.include_router(dashboard.router,  prefix="/v1")
app.include_router(students.router,   prefix="/v1")
app.include_router(subjects.router,   prefix="/v1")
app.include_router(grades.router,     prefix="/v1")
app.include_router(reports.router,    prefix="/v1")


# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


@app.on_event("startup")
def _create_tables():
    init_db()
    logger.info("%s %s started (env=%s)", settings.APP_TITLE, settings.APP_VERSION, settings.ENV)


# ✅ root
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - {settings.SCHOOL_NAME}"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)
