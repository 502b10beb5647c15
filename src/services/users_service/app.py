from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from src.services.users_service.routes import router
from src.services.users_service.exceptions import UserConflictError
from src.infra.database import DatabaseManager, init_schema
from src.common.logger import setup_logging, log_info, log_error, TypeMsg
from src.common.constants import MSG_INTERNAL_ERROR
from src.config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    await log_info("Starting Users Service...", type_msg=TypeMsg.INFO)
    db = DatabaseManager.from_settings(settings.database)
    await db.connect()
    await init_schema(db)
    app.state.db = db

    yield

    # Shutdown
    await log_info("Shutting down Users Service...", type_msg=TypeMsg.INFO)
    await db.disconnect()


app = FastAPI(
    title="Users Service",
    description="Microservice for managing the user directory",
    version=settings.system.VERSION,
    lifespan=lifespan
)

# Gateway не ограничивает origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UserConflictError)
async def conflict_handler(request: Request, exc: UserConflictError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    await log_error(f"Необработанная ошибка {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": MSG_INTERNAL_ERROR})


app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.services.users_service.app:app",
        host=settings.deployment.USERS_SERVICE_HOST,
        port=settings.deployment.USERS_SERVICE_PORT,
        reload=settings.system.DEBUG,
    )
