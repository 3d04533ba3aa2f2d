from urllib.parse import quote

from loguru import logger

from config.app_settings import settings
from core.ai_coach import GenerationClient, RoutineOrchestrator
from core.cache import Cache
from core.cache.images import ImageCache
from core.cache.preferences import FilePreferencesStore, PreferencesCacheManager, PreferencesStore
from core.cache.stores import FileImageStore, ImageStore, RedisImageStore
from core.enums import ImageStoreBackend
from core.exceptions import AlternativesError, GenerationError
from core.schemas import Exercise, UserPreferences, WorkoutPlan


class RoutineSession:
    """State of one user's session: preferences, current plan and the open swap."""

    def __init__(
        self,
        orchestrator: RoutineOrchestrator,
        preferences_cache: PreferencesStore | type[PreferencesCacheManager] | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.preferences_cache = preferences_cache
        self.preferences: UserPreferences | None = None
        self.plan: WorkoutPlan | None = None
        self.is_loading = False
        self.swap_target: Exercise | None = None
        self.alternatives: list[Exercise] = []

    async def load_preferences(self) -> UserPreferences:
        if self.preferences_cache is None:
            return self.preferences or UserPreferences()
        return await self.preferences_cache.load()

    async def generate(self, prefs: UserPreferences) -> WorkoutPlan:
        self.is_loading = True
        self.preferences = prefs
        self.plan = None
        self.cancel_swap()
        try:
            if self.preferences_cache is not None:
                await self.preferences_cache.save(prefs)
            plan = await self.orchestrator.generate_plan(prefs)
        except GenerationError as exc:
            logger.error(f"session.generate failed reason={exc.reason} error={exc}")
            raise
        finally:
            self.is_loading = False
        self.plan = plan
        return plan

    async def request_swap(self, exercise: Exercise) -> list[Exercise]:
        self.swap_target = exercise
        self.alternatives = []
        injuries = self.preferences.injuries if self.preferences else ""
        try:
            self.alternatives = await self.orchestrator.find_alternatives(exercise, injuries)
        except AlternativesError as exc:
            logger.warning(f"session.swap alternatives_failed exercise={exercise.name!r} reason={exc.reason}")
            raise
        return self.alternatives

    def cancel_swap(self) -> None:
        self.swap_target = None
        self.alternatives = []

    def complete_swap(self, original: Exercise, replacement: Exercise) -> WorkoutPlan | None:
        if self.plan is None:
            return None
        self.plan = self.orchestrator.swap(self.plan, original, replacement)
        logger.info(f"session.swap completed original={original.name!r} replacement={replacement.name!r}")
        self.cancel_swap()
        return self.plan

    async def exercise_image(self, exercise_name: str) -> str | None:
        return await self.orchestrator.exercise_image(exercise_name)

    @staticmethod
    def exercise_tutorial_url(exercise_name: str) -> str:
        return f"{settings.TUTORIAL_SEARCH_URL}{quote(f'{exercise_name} exercise tutorial', safe='')}"

    async def close(self) -> None:
        await self.orchestrator.images.drain()
        await Cache.base.close_pool()


def build_image_store(backend: str | ImageStoreBackend | None = None) -> ImageStore | None:
    resolved = ImageStoreBackend(backend or settings.IMAGE_STORE_BACKEND)
    if resolved is ImageStoreBackend.REDIS:
        return RedisImageStore()
    if resolved is ImageStoreBackend.FILE:
        return FileImageStore(settings.IMAGE_STORE_DIR)
    return None


def build_preferences_store(
    backend: str | ImageStoreBackend | None = None,
) -> PreferencesStore | type[PreferencesCacheManager] | None:
    resolved = ImageStoreBackend(backend or settings.IMAGE_STORE_BACKEND)
    if resolved is ImageStoreBackend.REDIS:
        return Cache.preferences
    if resolved is ImageStoreBackend.FILE:
        return FilePreferencesStore(settings.PREFERENCES_FILE)
    return None


def build_session(*, client: GenerationClient | None = None, configure_logging: bool = True) -> RoutineSession:
    if configure_logging:
        from config import configure_loguru

        configure_loguru()
    generation = client or GenerationClient()
    store = build_image_store()
    images = ImageCache(generation.generate_image, store)
    preferences_cache = build_preferences_store()
    logger.info(f"session.build image_store={settings.IMAGE_STORE_BACKEND} text_model={generation.text_model}")
    return RoutineSession(RoutineOrchestrator(generation, images), preferences_cache)
