from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./docshare.db"
    database_echo: bool = False

    # Токены выдает внешний провайдер идентификации, мы их только декодируем
    jwt_secret: str
    jwt_algorithm: str = "HS256"

    # Чтение документа без входа в систему (наблюдаемое поведение, см. DESIGN.md)
    anonymous_read_fallback: bool = True

    # Сервис совместного редактирования
    realtime_base_url: str = "https://api.liveblocks.io"
    realtime_secret_key: str = ""
    realtime_timeout_seconds: float = 10.0

    # Каталог пользователей провайдера идентификации
    identity_base_url: str = "https://api.clerk.com"
    identity_secret_key: str = ""
    identity_timeout_seconds: float = 10.0
    identity_page_size: int = 100

    # Административные операции отключены, пока ключ не задан
    admin_api_key: Optional[str] = None

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()


def get_settings() -> Settings:
    """Зависимость FastAPI для получения настроек"""
    return settings
