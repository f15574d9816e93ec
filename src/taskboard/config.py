"""Load optional service configuration from `.taskboard/config.yaml`."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from loguru import logger

from .constants import (
    CONFIG_FILE,
    DEFAULT_STAGE,
    ENV_LOG_LEVEL,
    ENV_ORDER_ON_CREATE,
    ENV_SERIALIZE_CREATION,
    ORDER_ON_CREATE_GLOBAL,
    ORDER_ON_CREATE_MODES,
)
from .io_utils import _load_data_with_error

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass
class ServiceConfig:
    """Runtime knobs for the board service.

    ``order_on_create`` selects how a new task's ``order`` is computed:
    ``global`` counts every task in the project (the historical behaviour the
    board UI was built against), ``stage`` counts only tasks already in the
    new task's stage.
    """

    default_stage: str = DEFAULT_STAGE
    order_on_create: str = ORDER_ON_CREATE_GLOBAL
    serialize_creation: bool = False
    log_level: str = "INFO"

    @property
    def stage_aware_order(self) -> bool:
        return self.order_on_create != ORDER_ON_CREATE_GLOBAL


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    return None


def load_service_config(
    state_root: Path,
    environ: Optional[Mapping[str, str]] = None,
) -> tuple[ServiceConfig, str | None]:
    """Load the optional config file and apply environment overrides.

    Args:
        state_root: The `.taskboard/` directory.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        A tuple of `(config, error_message)`. A missing file yields defaults and
        no error; an unreadable file yields defaults plus the parse error.
    """
    env = os.environ if environ is None else environ
    data, err = _load_data_with_error(state_root / CONFIG_FILE, {})
    if err:
        logger.warning("Ignoring unreadable config: {}", err)
        data = {}

    config = ServiceConfig()

    stage = data.get("default_stage")
    if isinstance(stage, str) and stage.strip():
        config.default_stage = stage.strip()

    mode = env.get(ENV_ORDER_ON_CREATE) or data.get("order_on_create")
    if isinstance(mode, str) and mode.strip().lower() in ORDER_ON_CREATE_MODES:
        config.order_on_create = mode.strip().lower()
    elif mode is not None:
        logger.warning("Unknown order_on_create {!r}; using {}", mode, config.order_on_create)

    serialize = env.get(ENV_SERIALIZE_CREATION)
    if serialize is None:
        serialize = data.get("serialize_creation")
    if serialize is not None:
        parsed = _parse_bool(serialize)
        if parsed is not None:
            config.serialize_creation = parsed

    level = env.get(ENV_LOG_LEVEL) or data.get("log_level")
    if isinstance(level, str) and level.strip():
        config.log_level = level.strip().upper()

    return config, err
