"""
API key vault - learners' own provider keys in `user_secure_data/{learner_id}`.

Keys are written with a merge so saving one slot never clears the others,
and are only ever read back masked. Resolution falls back to the server key
for the slot's provider when the learner has not supplied one.
"""

from typing import Dict, Mapping, Optional

from fluentpath.ai.types import KeySlot, Provider
from fluentpath.config import Settings, get_settings
from fluentpath.engines.progress import MalformedInputError
from fluentpath.kernel.store import DocumentStore
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)

SECURE_DATA_COLLECTION = "user_secure_data"


def mask_key(value: str) -> str:
    """Show only the last four characters."""
    if not value:
        return ""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


class ApiKeyVault:
    def __init__(self, store: DocumentStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()

    async def _stored(self, learner_id: str) -> Dict[str, str]:
        snapshot = await self.store.get(SECURE_DATA_COLLECTION, learner_id)
        data = snapshot.to_dict()
        return {
            slot.value: data[slot.value]
            for slot in KeySlot
            if isinstance(data.get(slot.value), str) and data[slot.value]
        }

    async def masked(self, learner_id: str) -> Dict[str, str]:
        """Every slot with its masked value ("" when unset)."""
        stored = await self._stored(learner_id)
        return {slot.value: mask_key(stored.get(slot.value, "")) for slot in KeySlot}

    async def save(self, learner_id: str, keys: Mapping[str, str]) -> Dict[str, str]:
        """Merge-save the given slots and return the masked view."""
        if not learner_id:
            raise MalformedInputError("learner_id")
        known = {slot.value for slot in KeySlot}
        unknown = sorted(set(keys) - known)
        if unknown:
            raise ValueError(f"Unknown API key slot(s): {', '.join(unknown)}")

        cleaned = {name: (value or "").strip() for name, value in keys.items()}
        await self.store.set(SECURE_DATA_COLLECTION, learner_id, cleaned, merge=True)
        logger.info("API keys saved", extra={"learner_id": learner_id, "slots": sorted(cleaned)})
        return await self.masked(learner_id)

    async def resolve(self, learner_id: str, slot: KeySlot) -> str:
        """Key to call the slot's provider with; "" when none is configured anywhere."""
        stored = await self._stored(learner_id)
        if stored.get(slot.value):
            return stored[slot.value]
        return self.server_key(slot.provider)

    def server_key(self, provider: Provider) -> str:
        if provider == Provider.GEMINI:
            return self.settings.gemini_api_key
        return self.settings.openrouter_api_key
