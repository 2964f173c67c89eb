"""Application configuration for ativmob."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from ativmob._constants import DEFAULT_GREETING, DEFAULT_THEME_KEY, STATES_URL
from ativmob.exceptions import AtivMobConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on", "sim"}:
        return True
    if normalized in {"0", "false", "no", "n", "off", "nao", "não"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise AtivMobConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class AtivMobConfig:
    """Application configuration.

    Parameters
    ----------
    states_url : str
        Endpoint returning the JSON array of Brazilian states.
    request_timeout : float
        Total timeout in seconds for one HTTP request.
    location_timeout : float
        Seconds to wait for the platform position callback before failing
        with :class:`~ativmob.exceptions.LocationTimeoutError`.  Set to
        ``0`` to wait indefinitely.
    default_greeting : str
        Greeting shown before the user enters a name.
    theme_key : str
        Key of the dark-theme flag in the preference store.
    preferences_path : str or None
        JSON file backing the preference store.  ``None`` keeps the
        preferences in memory only.
    skip_states_if_loaded : bool
        When ``True`` a states fetch is a no-op while another fetch is
        running or the list is already loaded.
    """

    states_url: str = STATES_URL
    request_timeout: float = 15.0
    location_timeout: float = 30.0
    default_greeting: str = DEFAULT_GREETING
    theme_key: str = DEFAULT_THEME_KEY
    preferences_path: str | None = None
    skip_states_if_loaded: bool = False

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise AtivMobConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.location_timeout < 0:
            raise AtivMobConfigError(f"location_timeout must not be negative, got {self.location_timeout}")
        if not self.theme_key.strip():
            raise AtivMobConfigError("theme_key must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> AtivMobConfig:
        """Create configuration from ``ATIVMOB_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "ATIVMOB_STATES_URL": "states_url",
            "ATIVMOB_DEFAULT_GREETING": "default_greeting",
            "ATIVMOB_THEME_KEY": "theme_key",
            "ATIVMOB_PREFERENCES_PATH": "preferences_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric fields are parsed separately so a typo fails loudly.
        for env_key, field_name in (
            ("ATIVMOB_REQUEST_TIMEOUT", "request_timeout"),
            ("ATIVMOB_LOCATION_TIMEOUT", "location_timeout"),
        ):
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "skip_states_if_loaded" not in overrides:
            config_kwargs["skip_states_if_loaded"] = _env_bool(env.get("ATIVMOB_SKIP_STATES_IF_LOADED"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
