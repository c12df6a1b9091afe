import structlog
from backend_common.fastapi_app import create_service_app
from fastapi.responses import JSONResponse

from .exceptions import NotFoundException
from .logging_config import configure_logging
from .redis_client import close_redis, init_redis
from .routers.dashboard import router as dashboard_router
from .routers.exercises import router as exercises_router
from .routers.workouts import router as workouts_router

configure_logging()
logger = structlog.get_logger(__name__)

app = create_service_app(
    title="diary-service",
    version="0.1.0",
    description="Workout diary: workouts, exercises, sets and the dashboard",
)


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request, exc: NotFoundException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.on_event("startup")
async def startup_event():
    await init_redis()


@app.on_event("shutdown")
async def shutdown_event():
    await close_redis()


app.include_router(dashboard_router, prefix="/dashboard")
app.include_router(exercises_router, prefix="/exercises")
app.include_router(workouts_router)
