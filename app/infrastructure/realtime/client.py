import logging
from dataclasses import dataclass
from typing import Optional, Dict, List, Any

import httpx

from app.core.config import settings
from app.core.errors import ExternalServiceFailure

logger = logging.getLogger(__name__)

SERVICE_NAME = "realtime"


@dataclass(frozen=True)
class RealtimeAuthorization:
    """Ответ сервиса совместного редактирования, передаваемый клиенту как есть"""
    status_code: int
    body: bytes


class RealtimeClient:
    """HTTP-клиент сервиса совместного редактирования.

    Один httpx.AsyncClient на процесс, соединения переиспользуются между
    запросами. Повторов нет: любая ошибка сети или ответ не 2xx
    превращаются в ExternalServiceFailure.
    """

    def __init__(
        self,
        base_url: str,
        secret_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {secret_key}"},
            timeout=httpx.Timeout(timeout, connect=5.0),
            transport=transport,
        )

    async def authorize_user(
        self,
        user_id: str,
        user_info: Dict[str, Any],
        permissions: Dict[str, List[str]]
    ) -> RealtimeAuthorization:
        """Получение токена сессии для пользователя"""
        payload = {
            "userId": user_id,
            "userInfo": user_info,
            "permissions": permissions,
        }

        try:
            response = await self._client.post("/v2/authorize-user", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Realtime service request failed: {e}")
            raise ExternalServiceFailure(SERVICE_NAME) from e

        if response.is_error:
            logger.error(
                f"Realtime service rejected authorization for {user_id}: "
                f"{response.status_code} {response.text[:200]}"
            )
            raise ExternalServiceFailure(
                SERVICE_NAME,
                f"Realtime service responded with status {response.status_code}"
            )

        return RealtimeAuthorization(status_code=response.status_code, body=response.content)

    async def aclose(self) -> None:
        await self._client.aclose()


_client: Optional[RealtimeClient] = None


def get_realtime_client() -> RealtimeClient:
    """Зависимость FastAPI: общий клиент, создается при первом обращении"""
    global _client
    if _client is None:
        _client = RealtimeClient(
            base_url=settings.realtime_base_url,
            secret_key=settings.realtime_secret_key,
            timeout=settings.realtime_timeout_seconds,
        )
    return _client


async def close_realtime_client() -> None:
    """Закрытие общего клиента при остановке приложения"""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
