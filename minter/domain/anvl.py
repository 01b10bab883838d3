from __future__ import annotations

import re
from typing import Mapping

_UNESCAPE_RE = re.compile(r"%([0-9A-Fa-f]{2})")


def _escape(value: str, *, is_key: bool) -> str:
    # '%' экранируется первым, иначе двойное экранирование.
    value = value.replace("%", "%25").replace("\n", "%0A").replace("\r", "%0D")
    if is_key:
        value = value.replace(":", "%3A")
    return value


def _unescape(value: str) -> str:
    return _UNESCAPE_RE.sub(lambda m: chr(int(m.group(1), 16)), value)


def encode_anvl(data: Mapping[str, str]) -> str:
    """
    Назначение:
        Сериализует payload в ANVL (формат EZID): по строке 'key: value' на запись.
    Контракт:
        - Порядок строк совпадает с порядком ключей.
        - В ключах экранируются '%', ':', CR, LF; в значениях '%', CR, LF.
    """
    lines = [f"{_escape(str(k), is_key=True)}: {_escape(str(v), is_key=False)}" for k, v in data.items()]
    return "\n".join(lines)


def parse_anvl(text: str | None) -> dict[str, str] | None:
    """
    Назначение:
        Разбирает ANVL-ответ сервиса.
    Выходные данные:
        dict[str, str] | None
            None, если в теле нет ни одной строки 'key: value'.
    """
    if not text:
        return None
    parsed: dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            continue
        parsed[_unescape(key.strip())] = _unescape(value.strip())
    return parsed or None


__all__ = ["encode_anvl", "parse_anvl"]
