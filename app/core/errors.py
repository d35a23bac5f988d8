"""Иерархия ошибок контроля доступа.

Сервисы поднимают эти исключения, а обработчики в app.main превращают их
в ответы вида {"error": code, "message": ...}.
"""

from fastapi import status


class AccessControlError(Exception):
    """Базовая ошибка сервиса"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: str = "ACCESS_CONTROL_ERROR"):
        self.code = code
        self.message = message
        super().__init__(message)


class Unauthenticated(AccessControlError):
    """Нет контекста идентификации вызывающего"""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not signed in"):
        super().__init__(message, code="UNAUTHENTICATED")


class NotFound(AccessControlError):
    """Документ или разрешение не существует"""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} not found: {resource_id}", code="NOT_FOUND")


class Forbidden(AccessControlError):
    """Вердикт не дает требуемой возможности"""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, required_capability: str = ""):
        self.required_capability = required_capability
        message = (
            f"Permission denied: {required_capability}"
            if required_capability
            else "Permission denied"
        )
        super().__init__(message, code="FORBIDDEN")


class InvalidOperation(AccessControlError):
    """Операция отклонена до изменения хранилища"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_OPERATION")


class ExternalServiceFailure(AccessControlError):
    """Внешний сервис недоступен или вернул ошибку"""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, service_name: str, message: str = ""):
        self.service_name = service_name
        super().__init__(
            message or f"External service {service_name} is unavailable",
            code="EXTERNAL_SERVICE_FAILURE",
        )


class ConfigurationError(Exception):
    """Окружение не поддерживается сервисом; обнаруживается при запуске"""
