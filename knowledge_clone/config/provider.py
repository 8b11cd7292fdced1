"""Resolve retrieval settings and credentials from the settings store."""

import json
import logging
import os
import re
from collections.abc import Mapping

from knowledge_clone.config.store import SettingsStore
from knowledge_clone.core import (
    ConfigError,
    Credentials,
    ProviderName,
    RetrievalConfig,
    TurnContext,
)

logger = logging.getLogger(__name__)

# Persisted keys
VECTOR_PERCENTAGE_KEY = "vectorPercentage"
RESULT_LENGTH_KEY = "resultLength"
SUMMARIZE_THRESHOLD_KEY = "summarizeThreshold"
TOP_K_KEY = "topK"
KNOWLEDGE_SOURCES_KEY = "knowledgeSources"
WEB_SEARCH_PROVIDER_KEY = "webSearchProvider"

CREDENTIAL_KEYS: dict[ProviderName, str] = {
    ProviderName.EMBEDDING: "openaiApiKey",
    ProviderName.VECTOR_STORE: "pineconeApiKey",
    ProviderName.WEB_SEARCH: "zaiApiKey",
}

CREDENTIAL_ENV_VARS: dict[ProviderName, str] = {
    ProviderName.EMBEDDING: "OPENAI_API_KEY",
    ProviderName.VECTOR_STORE: "PINECONE_API_KEY",
    ProviderName.WEB_SEARCH: "ZAI_API_KEY",
}

DEFAULT_VECTOR_WEIGHT = 75
DEFAULT_RESULT_LENGTH = 200
DEFAULT_SUMMARIZE_THRESHOLD = 500
DEFAULT_TOP_K = 3
WEB_SEARCH_PROVIDERS = ("stub", "zai")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_STRICT_INT = re.compile(r"\s*[+-]?\d+\s*")


def parse_int_setting(
    key: str,
    raw: str | None,
    default: int,
    minimum: int | None = None,
    maximum: int | None = None,
    strict: bool = False,
) -> int:
    """Parse an integer setting and clamp it into range.

    The lenient mode reads a leading integer the way browser ``parseInt``
    does (``"75.9"`` -> 75) and falls back to ``default`` otherwise.

    Raises:
        ConfigError: In strict mode, when ``raw`` is not a plain integer
    """
    if raw is None or not raw.strip():
        if strict:
            raise ConfigError(key, raw)
        return default

    if strict:
        if not _STRICT_INT.fullmatch(raw):
            raise ConfigError(key, raw)
        value = int(raw.strip())
    else:
        match = _LEADING_INT.match(raw)
        if match is None:
            logger.warning("Setting %s has non-numeric value %r; using default %d", key, raw, default)
            return default
        value = int(match.group(1))

    if minimum is not None and value < minimum:
        logger.warning("Setting %s=%d below minimum; clamping to %d", key, value, minimum)
        value = minimum
    if maximum is not None and value > maximum:
        logger.warning("Setting %s=%d above maximum; clamping to %d", key, value, maximum)
        value = maximum
    return value


def default_credentials_from_env() -> dict[ProviderName, str]:
    """Built-in fallback keys taken from the environment."""
    return {
        provider: os.environ.get(env_var, "")
        for provider, env_var in CREDENTIAL_ENV_VARS.items()
    }


class ConfigProvider:
    """Single point of access to persisted settings.

    Read :meth:`snapshot` once at the start of a turn and pass the result
    down; nothing in the pipeline reads the store directly.
    """

    def __init__(
        self,
        store: SettingsStore,
        defaults: Mapping[ProviderName, str] | None = None,
    ) -> None:
        """Initialize provider.

        Args:
            store: Persisted settings
            defaults: Fallback keys used when no override is stored. Read
                from the environment when omitted.
        """
        self.store = store
        self.defaults: dict[ProviderName, str] = dict(
            defaults if defaults is not None else default_credentials_from_env()
        )

    def retrieval_config(self) -> RetrievalConfig:
        return RetrievalConfig(
            vector_weight=parse_int_setting(
                VECTOR_PERCENTAGE_KEY,
                self.store.get(VECTOR_PERCENTAGE_KEY),
                DEFAULT_VECTOR_WEIGHT,
                minimum=0,
                maximum=100,
            ),
            result_length=parse_int_setting(
                RESULT_LENGTH_KEY,
                self.store.get(RESULT_LENGTH_KEY),
                DEFAULT_RESULT_LENGTH,
                minimum=1,
            ),
            summarize_threshold=parse_int_setting(
                SUMMARIZE_THRESHOLD_KEY,
                self.store.get(SUMMARIZE_THRESHOLD_KEY),
                DEFAULT_SUMMARIZE_THRESHOLD,
                minimum=1,
            ),
            top_k=parse_int_setting(
                TOP_K_KEY,
                self.store.get(TOP_K_KEY),
                DEFAULT_TOP_K,
                minimum=1,
            ),
        )

    def web_search_provider(self) -> str:
        raw = (self.store.get(WEB_SEARCH_PROVIDER_KEY) or "stub").strip().lower()
        if raw not in WEB_SEARCH_PROVIDERS:
            logger.warning("Unknown web search provider %r; using stub", raw)
            return "stub"
        return raw

    def resolve_credentials(self, provider: ProviderName) -> Credentials | None:
        """Stored override first, then the built-in default.

        Returns:
            Credentials, or None when neither source has a key
        """
        override = self.store.get(CREDENTIAL_KEYS[provider])
        if override and override.strip():
            return Credentials(provider=provider, key=override.strip())

        default = self.defaults.get(provider, "")
        if default and default.strip():
            return Credentials(provider=provider, key=default.strip())

        logger.debug("No credentials available for %s", provider.value)
        return None

    def snapshot(self) -> TurnContext:
        """Capture everything a turn needs in one immutable object."""
        credentials = {}
        for provider in ProviderName:
            resolved = self.resolve_credentials(provider)
            if resolved is not None:
                credentials[provider] = resolved

        return TurnContext(
            config=self.retrieval_config(),
            credentials=credentials,
            web_search_provider=self.web_search_provider(),
        )

    def save_retrieval_config(self, config: RetrievalConfig) -> None:
        self.store.set(VECTOR_PERCENTAGE_KEY, str(config.vector_weight))
        self.store.set(RESULT_LENGTH_KEY, str(config.result_length))
        self.store.set(SUMMARIZE_THRESHOLD_KEY, str(config.summarize_threshold))
        self.store.set(TOP_K_KEY, str(config.top_k))

    def save_web_search_provider(self, name: str) -> None:
        if name not in WEB_SEARCH_PROVIDERS:
            raise ConfigError(WEB_SEARCH_PROVIDER_KEY, name)
        self.store.set(WEB_SEARCH_PROVIDER_KEY, name)

    def save_credentials(self, provider: ProviderName, key: str) -> None:
        """Persist an override; a blank key removes it."""
        if key.strip():
            self.store.set(CREDENTIAL_KEYS[provider], key.strip())
        else:
            self.store.delete(CREDENTIAL_KEYS[provider])

    def knowledge_sources(self) -> list[str]:
        raw = self.store.get(KNOWLEDGE_SOURCES_KEY)
        if not raw:
            return []
        try:
            sources = json.loads(raw)
        except ValueError as e:
            logger.error("Error parsing knowledge sources: %s", e)
            return []
        if not isinstance(sources, list):
            logger.error("Knowledge sources setting is not a list; ignoring it")
            return []
        return [str(source) for source in sources]

    def add_knowledge_source(self, name: str) -> list[str]:
        sources = self.knowledge_sources()
        if name not in sources:
            sources.append(name)
            self.store.set(KNOWLEDGE_SOURCES_KEY, json.dumps(sources))
        return sources
