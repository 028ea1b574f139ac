"""Canonical RAGFlow plugin settings.

Plugin hosts hand over settings under many spellings (``RAGFLOW_API_URL``,
``ragflowApiUrl``, ``apiUrl`` ...). ``canonicalize_settings`` resolves all of
them once into a single typed ``RAGFlowSettings``.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

_ALIASES = {
    "api_url": ("RAGFLOW_API_URL", "ragflowApiUrl", "apiUrl", "API_URL"),
    "api_key": ("RAGFLOW_API_KEY", "ragflowApiKey", "apiKey", "API_KEY"),
    "agent_id": ("RAGFLOW_AGENT_ID", "ragflowAgentId", "agentId", "AGENT_ID"),
    "chat_id": ("RAGFLOW_CHAT_ID", "ragflowChatId", "chatId", "CHAT_ID"),
}

_MISSING_MARKERS = {"", "undefined", "null"}


@dataclass(frozen=True)
class RAGFlowSettings:
    """Connection settings for the RAGFlow backend."""

    api_url: str = ""
    api_key: str = ""
    agent_id: str = ""
    chat_id: str = ""

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def validate(self) -> List[str]:
        """Return human-readable problems; an empty list means usable."""
        errors = []
        if not self.api_url:
            errors.append("RAGFlow API URL is not configured")
        if not self.agent_id and not self.chat_id:
            errors.append("Neither an agent ID nor a chat ID is configured")
        return errors

    def safe_summary(self) -> dict:
        """Settings suitable for logging, with the API key masked."""
        return {
            "api_url": self.api_url or "(unset)",
            "api_key": "(set, hidden)" if self.api_key else "(unset)",
            "agent_id": self.agent_id or "(unset)",
            "chat_id": self.chat_id or "(unset)",
        }


def _is_missing(value) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() in _MISSING_MARKERS


def _key_variants(key: str) -> Iterable[str]:
    no_underscore = key.replace("_", "")
    return (key, key.lower(), no_underscore, no_underscore.lower())


def _lookup(raw: Mapping, aliases: Iterable[str]) -> Optional[str]:
    for alias in aliases:
        for variant in _key_variants(alias):
            value = raw.get(variant)
            if not _is_missing(value):
                return str(value).strip()
    return None


def _normalize_url(url: str) -> str:
    if url and not url.lower().startswith(("http://", "https://")):
        logger.warning(f"RAGFlow API URL '{url}' has no scheme, assuming http://")
        return f"http://{url}"
    return url


def canonicalize_settings(
    raw: Optional[Mapping], defaults: Optional[RAGFlowSettings] = None
) -> RAGFlowSettings:
    """Resolve every known alias into one RAGFlowSettings.

    Args:
        raw: Settings mapping from the plugin host (may be None).
        defaults: Values used for fields that no alias provides.
    """
    defaults = defaults or RAGFlowSettings()
    raw = raw or {}

    resolved = {}
    for field_name, aliases in _ALIASES.items():
        value = _lookup(raw, aliases)
        resolved[field_name] = value if value is not None else getattr(defaults, field_name)

    resolved["api_url"] = _normalize_url(resolved["api_url"])
    settings = RAGFlowSettings(**resolved)
    logger.debug(f"Canonical RAGFlow settings: {settings.safe_summary()}")
    return settings
