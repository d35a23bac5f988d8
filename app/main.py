import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.http.health import router as health_router
from app.api.http.users import router as users_router
from app.api.http.documents import router as documents_router
from app.api.http.sharing import router as sharing_router
from app.api.http.collaboration import router as collaboration_router
from app.api.http.admin import router as admin_router
from app.core.config import settings
from app.core.db import engine
from app.core.errors import AccessControlError, ExternalServiceFailure
from app.db.repositories.sharing_repository import insert_for_dialect
from app.infrastructure.identity.client import close_identity_client
from app.infrastructure.realtime.client import close_realtime_client

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

DOCUMENT_STORE = "document-store"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Неподдерживаемая БД должна остановить запуск, а не первый запрос
    insert_for_dialect(engine.dialect.name)
    logger.info("DocShare API starting")
    yield
    await close_realtime_client()
    await close_identity_client()
    logger.info("DocShare API stopped")


app = FastAPI(
    title="DocShare",
    description="Контроль доступа и совместный доступ к документам",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AccessControlError)
async def access_control_error_handler(request: Request, exc: AccessControlError):
    """Ошибки сервисов в формате {"error": code, "message": ...}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message}
    )


@app.exception_handler(SQLAlchemyError)
async def document_store_error_handler(request: Request, exc: SQLAlchemyError):
    """Сбой хранилища документов отдается как ExternalServiceFailure"""
    logger.error(f"Document store failure on {request.method} {request.url.path}: {exc}")
    return await access_control_error_handler(request, ExternalServiceFailure(DOCUMENT_STORE))


# Подключаем роутеры
app.include_router(health_router)
app.include_router(users_router)
app.include_router(documents_router)
app.include_router(sharing_router)
app.include_router(collaboration_router)
app.include_router(admin_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "DocShare API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
