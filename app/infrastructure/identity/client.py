import logging
from typing import Optional, List, Dict, Any

import httpx

from app.core.config import settings
from app.core.errors import ExternalServiceFailure
from app.domains.identity.entities import DirectoryUser

logger = logging.getLogger(__name__)

SERVICE_NAME = "identity-provider"


class IdentityProviderClient:
    """HTTP-клиент каталога пользователей провайдера идентификации.

    Устроен как клиент сервиса совместного редактирования: один
    httpx.AsyncClient на процесс, без повторов, любая ошибка сети или ответ
    не 2xx превращаются в ExternalServiceFailure.
    """

    def __init__(
        self,
        base_url: str,
        secret_key: str,
        timeout: float = 10.0,
        page_size: int = 100,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.page_size = page_size
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {secret_key}"},
            timeout=httpx.Timeout(timeout, connect=5.0),
            transport=transport,
        )

    async def list_users(self, organization_id: Optional[str] = None) -> List[DirectoryUser]:
        """Пользователи провайдера, при необходимости только одной организации"""
        params: Dict[str, Any] = {"limit": self.page_size}
        if organization_id:
            params["organization_id"] = organization_id

        try:
            response = await self._client.get("/v1/users", params=params)
        except httpx.HTTPError as e:
            raise ExternalServiceFailure(SERVICE_NAME, f"Identity provider request failed: {e}") from e

        if response.is_error:
            raise ExternalServiceFailure(
                SERVICE_NAME,
                f"Identity provider responded with status {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalServiceFailure(SERVICE_NAME, "Identity provider returned invalid JSON") from e

        # Список может приходить как есть или в обертке {"data": [...]}
        records = payload.get("data", []) if isinstance(payload, dict) else payload
        try:
            return [self._to_directory_user(record) for record in records]
        except (KeyError, TypeError, AttributeError) as e:
            raise ExternalServiceFailure(SERVICE_NAME, "Identity provider returned malformed users") from e

    def _to_directory_user(self, record: Dict[str, Any]) -> DirectoryUser:
        full_name = " ".join(
            part for part in (record.get("first_name"), record.get("last_name")) if part
        )

        primary_email_id = record.get("primary_email_address_id")
        emails = record.get("email_addresses") or []
        email = next(
            (item.get("email_address") for item in emails if item.get("id") == primary_email_id),
            None
        )

        return DirectoryUser(
            id=str(record["id"]),
            full_name=full_name or None,
            email=email,
            avatar_url=record.get("image_url"),
        )

    async def aclose(self) -> None:
        await self._client.aclose()


_client: Optional[IdentityProviderClient] = None


def get_identity_client() -> IdentityProviderClient:
    """Зависимость FastAPI: общий клиент, создается при первом обращении"""
    global _client
    if _client is None:
        _client = IdentityProviderClient(
            base_url=settings.identity_base_url,
            secret_key=settings.identity_secret_key,
            timeout=settings.identity_timeout_seconds,
            page_size=settings.identity_page_size,
        )
    return _client


async def close_identity_client() -> None:
    """Закрытие общего клиента при остановке приложения"""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
