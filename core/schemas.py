from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from core.enums import GoalType, SplitType


class DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        coerce_numbers_to_str=True,
    )


class UserPreferences(DomainModel):
    # ranges belong to the form controls; values are passed through as given
    days_per_week: int = 4
    max_consecutive_rest_days: int = 2
    goal: GoalType | str = GoalType.HYPERTROPHY
    split_type: SplitType = SplitType.SPLIT
    focus_areas: str = ""
    injuries: str = ""

    @field_validator("goal", mode="before")
    @classmethod
    def _coerce_goal(cls, value: Any) -> Any:
        if isinstance(value, GoalType):
            return value
        text = str(value or "").strip()
        if text in GoalType.__members__:
            return GoalType[text]
        try:
            return GoalType(text)
        except ValueError:
            return text

    @field_validator("split_type", mode="before")
    @classmethod
    def _coerce_split_type(cls, value: Any) -> Any:
        if isinstance(value, str) and value in SplitType.__members__:
            return SplitType[value]
        return value

    @field_validator("focus_areas", "injuries", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Exercise(DomainModel):
    name: str
    sets: str
    reps: str
    muscle_group: str
    notes: str = ""
    instructions: list[str] = Field(default_factory=list)
    id: str | None = Field(default=None, exclude=True)

    @field_validator("notes", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class DayRoutine(DomainModel):
    day_name: str
    focus: str
    is_rest_day: bool
    exercises: list[Exercise] = Field(default_factory=list)


class WorkoutPlan(DomainModel):
    plan_name: str
    description: str
    schedule: list[DayRoutine] = Field(min_length=1)

    def iter_exercises(self) -> Iterator[tuple[int, int, Exercise]]:
        for day_index, day in enumerate(self.schedule):
            for position, exercise in enumerate(day.exercises):
                yield day_index, position, exercise
