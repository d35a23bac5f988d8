from pydantic import BaseModel
import uuid


class RealtimeAuthRequest(BaseModel):
    """Схема запроса токена для комнаты документа"""
    room: uuid.UUID
