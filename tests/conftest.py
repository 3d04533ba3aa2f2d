from copy import deepcopy
from typing import Any

import pytest

from core.schemas import DayRoutine, Exercise, WorkoutPlan
from tests.fakes import PLAN_PAYLOAD


@pytest.fixture
def plan_payload() -> dict[str, Any]:
    return deepcopy(PLAN_PAYLOAD)


@pytest.fixture
def plan() -> WorkoutPlan:
    return WorkoutPlan.model_validate(deepcopy(PLAN_PAYLOAD))


@pytest.fixture
def exercise() -> Exercise:
    return Exercise(name="Barbell Back Squat", sets="4", reps="6-8", muscle_group="Quadriceps", id="squat-1")


@pytest.fixture
def rest_day() -> DayRoutine:
    return DayRoutine(day_name="Day 7", focus="Rest", is_rest_day=True)
