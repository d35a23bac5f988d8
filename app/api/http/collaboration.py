from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.auth import get_optional_identity
from app.core.config import Settings, get_settings
from app.core.db import get_db
from app.domains.collaboration.schemas import RealtimeAuthRequest
from app.domains.collaboration.services import RealtimeSessionService
from app.domains.identity.entities import IdentityContext
from app.infrastructure.realtime.client import RealtimeClient, get_realtime_client

router = APIRouter(prefix="/realtime", tags=["collaboration"])


@router.post("/auth")
async def authorize_realtime_session(
    auth_request: RealtimeAuthRequest,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    client: RealtimeClient = Depends(get_realtime_client)
):
    """Токен сессии совместного редактирования для комнаты документа"""
    realtime_service = RealtimeSessionService(db, settings, client)
    authorization = await realtime_service.issue_session(identity, auth_request.room)

    # Ответ сервиса передается клиенту без изменений
    return Response(
        content=authorization.body,
        status_code=authorization.status_code,
        media_type="application/json"
    )
