from __future__ import annotations

SECRET_MASK = "***"

DEFAULT_SENSITIVE_KEYS: tuple[str, ...] = (
    "password",
    "service_password",
    "authorization",
    "token",
    "secret",
)


def maskSecret(value: str | None) -> str | None:
    """
    Назначение:
        Маскирует секрет (пароль сервиса идентификаторов) для stdout/логов/отчётов.

    Выходные данные:
        str | None
            '***', если значение задано, иначе None.
    """
    if value is None:
        return None
    return SECRET_MASK


def truncateText(value: str | None, limit: int = 500) -> str | None:
    """
    Назначение:
        Ограничивает длину тела ответа сервиса в сообщениях об ошибках.

    Входные данные:
        value: str | None
        limit: int
            Максимальная длина результата, включая суффикс '...'.
    """
    if value is None:
        return None
    if len(value) <= limit:
        return value
    suffix = "..." if limit > 3 else ""
    return value[: limit - len(suffix)] + suffix


def maskSecretsInObject(
    obj: object,
    sensitive_keys: tuple[str, ...] = DEFAULT_SENSITIVE_KEYS,
) -> object:
    """
    Назначение:
        Рекурсивно маскирует значения чувствительных ключей в dict/list
        (записи service_data, заголовки запроса).
    """
    sensitive = {key.lower() for key in sensitive_keys}
    if isinstance(obj, dict):
        masked: dict[str, object] = {}
        for k, v in obj.items():
            if str(k).lower() in sensitive:
                masked[k] = maskSecret(str(v) if v is not None else None)
            else:
                masked[k] = maskSecretsInObject(v, sensitive_keys)
        return masked
    if isinstance(obj, (list, tuple)):
        return [maskSecretsInObject(item, sensitive_keys) for item in obj]
    return obj
