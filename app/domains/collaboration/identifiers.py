"""Идентификаторы пользователей для сервиса совместного редактирования.

Сервис принимает только символы [A-Za-z0-9_-], а внешние клиенты
сопоставляют идентификаторы между вызовами, поэтому преобразование
зафиксировано как версионированный контракт.

Контракт v1:
  * символы A-Z, a-z, 0-9 и "-" остаются без изменений;
  * любой другой символ, включая сам "_", заменяется на "_" и две
    шестнадцатеричные цифры в верхнем регистре для каждого байта его
    представления в UTF-8.

Преобразование детерминировано и обратимо, поэтому разные исходные
идентификаторы никогда не совпадают после санитизации.
"""

import re

SANITIZER_VERSION = "v1"

_SAFE_CHARACTERS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-")
_SANITIZED_PATTERN = re.compile(r"(?:[A-Za-z0-9-]|_[0-9A-F]{2})*")
_ESCAPE_RUN = re.compile(r"(?:_[0-9A-F]{2})+")


def sanitize_user_id(user_id: str) -> str:
    """Идентификатор в алфавите [A-Za-z0-9_-]"""
    parts = []
    for char in user_id:
        if char in _SAFE_CHARACTERS:
            parts.append(char)
        else:
            parts.append("".join(f"_{byte:02X}" for byte in char.encode("utf-8")))
    return "".join(parts)


def restore_user_id(sanitized: str) -> str:
    """Обратное преобразование для sanitize_user_id"""
    if not _SANITIZED_PATTERN.fullmatch(sanitized):
        raise ValueError(f"Not a {SANITIZER_VERSION} sanitized identifier: {sanitized!r}")

    # Многобайтовые символы занимают несколько экранированных байтов подряд
    return _ESCAPE_RUN.sub(
        lambda match: bytes.fromhex(match.group(0).replace("_", "")).decode("utf-8"),
        sanitized
    )
