"""
Environment settings for resticle.

Variables:
    RESTICLE_ROOT_PATH        root path or base URL for all requests
    RESTICLE_DEFAULT_HEADERS  JSON object of headers sent with every request
    RESTICLE_TIMEOUT          HTTP timeout in seconds
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache

from pydantic import ValidationError

from resticle.core.exceptions import ConfigurationError

from .schemas import FactorySettings

logger = logging.getLogger(__name__)


def load_settings() -> FactorySettings:
    """
    Read settings from the environment.

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    raw_headers = os.getenv("RESTICLE_DEFAULT_HEADERS", "")
    try:
        headers = json.loads(raw_headers) if raw_headers else {}
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"RESTICLE_DEFAULT_HEADERS is not valid JSON: {e}") from e

    try:
        return FactorySettings(
            root_path=os.getenv("RESTICLE_ROOT_PATH", ""),
            default_headers=headers,
            timeout=os.getenv("RESTICLE_TIMEOUT", "30"),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid resticle settings: {e}") from e


@lru_cache()
def get_settings() -> FactorySettings:
    """
    Get settings from environment.

    Uses lru_cache for singleton pattern; call ``get_settings.cache_clear()``
    after changing the environment.
    """
    settings = load_settings()
    logger.debug(f"[settings] root_path={settings.root_path!r}")
    return settings
