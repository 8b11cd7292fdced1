"""Settings persistence and per-turn configuration."""

from knowledge_clone.config.provider import (
    CREDENTIAL_KEYS,
    ConfigProvider,
    default_credentials_from_env,
    parse_int_setting,
)
from knowledge_clone.config.store import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
    SettingsStore,
)

__all__ = [
    "CREDENTIAL_KEYS",
    "ConfigProvider",
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    "SettingsStore",
    "default_credentials_from_env",
    "parse_int_setting",
]
