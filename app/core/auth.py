import logging
import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings, get_settings
from app.core.errors import Unauthenticated
from app.core.security import verify_token
from app.domains.identity.entities import IdentityContext

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[IdentityContext]:
    """Контекст вызывающего или None для анонимного запроса"""
    if credentials is None:
        return None

    payload = verify_token(credentials.credentials)
    if payload is None:
        return None

    return IdentityContext.from_claims(payload)


async def get_current_identity(
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
) -> IdentityContext:
    """Зависимость для маршрутов, требующих входа"""
    if identity is None:
        raise Unauthenticated()
    return identity


async def require_admin(
    x_admin_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Доступ к административным операциям только по служебному ключу"""
    if not settings.admin_api_key:
        # Без настроенного ключа административный API не существует
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    if not x_admin_key or not secrets.compare_digest(x_admin_key, settings.admin_api_key):
        logger.warning("Rejected administrative request with invalid key")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin key")
