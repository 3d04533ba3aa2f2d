import asyncio
import json
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger
from pydantic import ValidationError

from core.schemas import UserPreferences
from .base import BaseCacheManager
from .stores import write_atomic

PREFERENCES_KEY = "preferences"
PREFERENCES_FIELD = "last_used"


@runtime_checkable
class PreferencesStore(Protocol):
    """Last-used form values; neither call raises."""

    async def load(self) -> UserPreferences: ...

    async def save(self, prefs: UserPreferences) -> None: ...


def _dump(prefs: UserPreferences) -> dict[str, Any]:
    return prefs.model_dump(mode="json", by_alias=True)


def merge_with_defaults(saved: dict[str, Any] | None) -> UserPreferences:
    """Return ``saved`` layered over the default preferences."""
    defaults = UserPreferences()
    if not saved:
        return defaults
    try:
        return UserPreferences.model_validate({**_dump(defaults), **saved})
    except ValidationError as e:
        logger.warning(f"Saved preferences are invalid, using defaults: {e.error_count()} errors")
        return defaults


class PreferencesCacheManager(BaseCacheManager):
    @classmethod
    async def load(cls) -> UserPreferences:
        """Return the last saved preferences merged over the defaults."""
        return merge_with_defaults(await cls.get_json(PREFERENCES_KEY, PREFERENCES_FIELD))

    @classmethod
    async def save(cls, prefs: UserPreferences) -> None:
        await cls.set_json(PREFERENCES_KEY, PREFERENCES_FIELD, _dump(prefs))
        logger.debug(f"Preferences saved days={prefs.days_per_week} goal={prefs.goal}")


class FilePreferencesStore:
    """Preferences kept as a single JSON file, written atomically."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def load(self) -> UserPreferences:
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return UserPreferences()
        except OSError as e:
            logger.warning(f"Preferences file unreadable [{self.path}]: {e}")
            return UserPreferences()
        try:
            data = json.loads(raw)
        except JSONDecodeError as e:
            logger.error(f"Invalid preferences JSON [{self.path}]: {e}")
            return UserPreferences()
        if not isinstance(data, dict):
            logger.error(f"Unexpected preferences payload [{self.path}]: {type(data).__name__}")
            return UserPreferences()
        return merge_with_defaults(data)

    async def save(self, prefs: UserPreferences) -> None:
        try:
            await asyncio.to_thread(write_atomic, self.path, json.dumps(_dump(prefs)))
        except OSError as e:
            logger.error(f"Preferences write failed [{self.path}]: {e}")
            return
        logger.debug(f"Preferences saved path={self.path} days={prefs.days_per_week}")
