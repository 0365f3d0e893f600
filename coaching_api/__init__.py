# coaching_api/__init__.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.database import init_db, close_db
from .core.errors import register_exception_handlers
from .core.logging import logger
from .middleware.request_id import RequestIDMiddleware
from .schemas import ErrorResponse
from .routes import (
    auth_router,
    teacher_router,
    batch_router,
    announcement_router,
    timetable_router,
    exam_router,
    fee_router,
    attendance_router,
    parent_router,
)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="API for managing coaching institute batches, attendance, tests and fees",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Include routers; failures share one documented envelope
    errors = {code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409)}
    batch_scoped = "/api/v1/batches/{batch_id}"
    app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"], responses=errors)
    app.include_router(teacher_router, prefix="/api/v1/teachers", tags=["Teachers"], responses=errors)
    app.include_router(batch_router, prefix="/api/v1/batches", tags=["Batches"], responses=errors)
    app.include_router(announcement_router, prefix=f"{batch_scoped}/announcements", tags=["Announcements"], responses=errors)
    app.include_router(timetable_router, prefix=f"{batch_scoped}/timetable", tags=["Timetable"], responses=errors)
    app.include_router(exam_router, prefix=f"{batch_scoped}/tests", tags=["Tests"], responses=errors)
    app.include_router(fee_router, prefix=f"{batch_scoped}/fees", tags=["Fees"], responses=errors)
    app.include_router(attendance_router, prefix=f"{batch_scoped}/attendance", tags=["Attendance"], responses=errors)
    app.include_router(parent_router, prefix="/api/v1/parents", tags=["Parents"], responses=errors)

    @app.get("/api/health", tags=["Health"])
    async def health_check():
        return {"success": True, "message": "Server is running", "data": {"version": settings.VERSION}}

    @app.on_event("startup")
    async def startup_event():
        await init_db()
        logger.info("Application startup completed")

    @app.on_event("shutdown")
    async def shutdown_event():
        await close_db()
        logger.info("Application shutdown completed")

    return app
