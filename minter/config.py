from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import yaml


@dataclass(frozen=True)
class Settings:
    # Identifier/data profile/service records
    config_store: str | None = None

    # Service credentials (override service_data.*)
    service_username: str | None = None
    service_password: str | None = None

    # HTTP
    timeout_seconds: float = 20.0
    tls_skip_verify: bool = False
    ca_file: str | None = None

    # Minting
    strict_profile: bool = False

    # Paths / logging
    log_dir: str = "./logs"
    report_dir: str = "./reports"
    log_level: str = "INFO"


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


ENV_NAMES = {
    "config_store": "MINTER_CONFIG_STORE",
    "service_username": "MINTER_SERVICE_USERNAME",
    "service_password": "MINTER_SERVICE_PASSWORD",
    "timeout_seconds": "MINTER_TIMEOUT_SECONDS",
    "tls_skip_verify": "MINTER_TLS_SKIP_VERIFY",
    "ca_file": "MINTER_CA_FILE",
    "strict_profile": "MINTER_STRICT_PROFILE",
    "log_dir": "MINTER_LOG_DIR",
    "report_dir": "MINTER_REPORT_DIR",
    "log_level": "MINTER_LOG_LEVEL",
}

BOOL_FIELDS = ("tls_skip_verify", "strict_profile")


def _read_yaml_config(path: Path) -> dict:
    if not path.exists() or not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Config file is not valid YAML: {path}: {exc}") from exc
    if not isinstance(data, dict):
        return {}
    return data


def _env_get(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def parse_bool(v: str | bool | None) -> bool | None:
    if v is None or isinstance(v, bool):
        return v
    vv = str(v).strip().lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean value: {v}")


def load_settings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: CLI > ENV > config > defaults
    """
    sources: list[str] = []
    defaults = Settings()

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    merged = {name: cfg.get(name, getattr(defaults, name)) for name in ENV_NAMES}

    # 2) env
    env = {name: _env_get(env_name) for name, env_name in ENV_NAMES.items()}
    if any(v is not None for v in env.values()):
        sources.append("env")
    for name, value in env.items():
        if value is not None:
            merged[name] = value

    # 3) CLI overrides (только явно переданные)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")
    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    settings = Settings(
        config_store=merged["config_store"],
        service_username=merged["service_username"],
        service_password=merged["service_password"],
        timeout_seconds=float(merged["timeout_seconds"]),
        tls_skip_verify=bool(parse_bool(merged["tls_skip_verify"])),
        ca_file=merged["ca_file"],
        strict_profile=bool(parse_bool(merged["strict_profile"])),
        log_dir=merged["log_dir"],
        report_dir=merged["report_dir"],
        log_level=str(merged["log_level"]),
    )

    return LoadedSettings(settings=settings, sources_used=sources)
