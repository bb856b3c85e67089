"""Settings resolution.

Order (later wins):
1) built-in defaults (see types.Settings)
2) optional YAML file: explicit path, else $XPECGEN_CONFIG, else ./xpecgen.yaml if present
3) environment variables

xpecgen.yaml supports:
- model: google/gemini-2.0-flash-exp:free
- endpoint: https://openrouter.ai/api/v1/chat/completions
- referer: https://xpecgen.local
- timeout: 60
- retry:
    max_retries: 5
    rate_limit_backoff_s: 2.0
    error_backoff_s: 1.0
- temperatures:
    architect: 0.7
    auditor: 0.2
    reviewer: 0.2

The API key is never read from the YAML file, only from OPENROUTER_API_KEY.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .errors import ConfigError
from .logging_util import get_logger
from .types import RetryPolicy, Settings, Temperatures

logger = get_logger(__name__)

DEFAULT_CONFIG_NAME = "xpecgen.yaml"

def clean_api_key(raw: Optional[str]) -> str:
    """Drop whitespace and quotes that sneak in when the key is pasted from a doc."""
    k = (raw or "").strip()
    k = k.strip(' "\'`')
    k = k.strip("“”‘’")
    return k

def _to_int(v: Any, field_name: str) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        raise ConfigError(f"{field_name} must be an integer, got {v!r}")

def _to_float(v: Any, field_name: str) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        raise ConfigError(f"{field_name} must be a number, got {v!r}")

def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config file: {path} ({e})")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return data

def _resolve_config_path(explicit: Optional[Union[str, Path]], env: Mapping[str, str]) -> Optional[Path]:
    if explicit:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(f"Config file not found: {p}")
        return p

    from_env = (env.get("XPECGEN_CONFIG") or "").strip()
    if from_env:
        p = Path(from_env)
        if not p.exists():
            raise ConfigError(f"XPECGEN_CONFIG points to a missing file: {p}")
        return p

    p = Path.cwd() / DEFAULT_CONFIG_NAME
    return p if p.exists() else None

def _apply_file(settings: Settings, data: Dict[str, Any]) -> None:
    if data.get("model"):
        settings.model = str(data["model"]).strip()
    if data.get("endpoint"):
        settings.endpoint = str(data["endpoint"]).strip()
    if data.get("referer"):
        settings.referer = str(data["referer"]).strip()
    if data.get("timeout") is not None:
        settings.timeout = _to_float(data["timeout"], "timeout")

    retry = data.get("retry") or {}
    if not isinstance(retry, dict):
        raise ConfigError("retry must be a mapping")
    if retry.get("max_retries") is not None:
        settings.retry.max_retries = _to_int(retry["max_retries"], "retry.max_retries")
    if retry.get("rate_limit_backoff_s") is not None:
        settings.retry.rate_limit_backoff_s = _to_float(retry["rate_limit_backoff_s"], "retry.rate_limit_backoff_s")
    if retry.get("error_backoff_s") is not None:
        settings.retry.error_backoff_s = _to_float(retry["error_backoff_s"], "retry.error_backoff_s")

    temps = data.get("temperatures") or {}
    if not isinstance(temps, dict):
        raise ConfigError("temperatures must be a mapping")
    for role in ("architect", "auditor", "reviewer"):
        if temps.get(role) is not None:
            value = _to_float(temps[role], f"temperatures.{role}")
            if not 0.0 <= value <= 2.0:
                raise ConfigError(f"temperatures.{role} must be within [0, 2], got {value}")
            setattr(settings.temperatures, role, value)

def _apply_env(settings: Settings, env: Mapping[str, str]) -> None:
    key = clean_api_key(env.get("OPENROUTER_API_KEY"))
    settings.api_key = key or None

    model = (env.get("OPENROUTER_MODEL") or "").strip()
    if model:
        settings.model = model

    endpoint = (env.get("XPECGEN_ENDPOINT") or "").strip()
    if endpoint:
        settings.endpoint = endpoint

    referer = (env.get("XPECGEN_REFERER") or "").strip()
    if referer:
        settings.referer = referer

    timeout = (env.get("XPECGEN_TIMEOUT") or "").strip()
    if timeout:
        settings.timeout = _to_float(timeout, "XPECGEN_TIMEOUT")

    retries = (env.get("XPECGEN_MAX_RETRIES") or "").strip()
    if retries:
        settings.retry.max_retries = _to_int(retries, "XPECGEN_MAX_RETRIES")

def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    env = os.environ if env is None else env
    settings = Settings(retry=RetryPolicy(), temperatures=Temperatures())

    path = _resolve_config_path(config_path, env)
    if path is not None:
        logger.debug("Loading config file: %s", path)
        _apply_file(settings, _load_yaml(path))

    _apply_env(settings, env)

    if settings.retry.max_retries < 1:
        raise ConfigError(f"max_retries must be >= 1, got {settings.retry.max_retries}")
    if settings.timeout <= 0:
        raise ConfigError(f"timeout must be positive, got {settings.timeout}")

    logger.debug(
        "Settings: model=%s endpoint=%s timeout=%s max_retries=%d api_key=%s",
        settings.model,
        settings.endpoint,
        settings.timeout,
        settings.retry.max_retries,
        "set" if settings.api_key else "missing",
    )
    return settings
