from loguru import logger

from core.cache.images import ImageCache
from core.schemas import Exercise, UserPreferences, WorkoutPlan
from core.utils.plans import swap_exercise
from .client import GenerationClient


class RoutineOrchestrator:
    """Routes plan, swap and image requests through the client and the image cache."""

    def __init__(self, client: GenerationClient, images: ImageCache) -> None:
        self.client = client
        self.images = images

    async def generate_plan(self, prefs: UserPreferences) -> WorkoutPlan:
        logger.info(
            f"routine.generate days={prefs.days_per_week} split={prefs.split_type.name} "
            f"goal={prefs.goal} injuries={bool(prefs.injuries.strip())}"
        )
        return await self.client.generate_plan(prefs)

    async def find_alternatives(self, exercise: Exercise, injuries: str) -> list[Exercise]:
        return await self.client.generate_alternatives(exercise, injuries)

    async def exercise_image(self, exercise_name: str) -> str | None:
        return await self.images.get(exercise_name)

    @staticmethod
    def swap(plan: WorkoutPlan, original: Exercise, replacement: Exercise) -> WorkoutPlan:
        return swap_exercise(plan, original, replacement)
