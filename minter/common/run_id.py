from __future__ import annotations

import uuid


def generate_run_id() -> str:
    """Сгенерировать run_id для одного запуска команды mint."""
    return uuid.uuid4().hex
