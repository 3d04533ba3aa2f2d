from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from core.schemas import DayRoutine, DomainModel, Exercise, WorkoutPlan

MAX_ALTERNATIVES = 3

_STEPS_DESCRIPTION = (
    "List of 3-5 distinct steps to perform the exercise safely. E.g. '1. Stand shoulder width apart', '2. Lower slowly'."
)


def _exercise_schema(*, notes_description: str | None = None, notes_required: bool = False) -> dict[str, Any]:
    notes: dict[str, Any] = {"type": "string"}
    if notes_description:
        notes["description"] = notes_description
    required = ["name", "sets", "reps", "muscleGroup", "instructions"]
    if notes_required:
        required.insert(4, "notes")
    return {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "sets": {"type": "string"},
            "reps": {"type": "string"},
            "muscleGroup": {"type": "string"},
            "notes": notes,
            "instructions": {
                "type": "array",
                "items": {"type": "string"},
                "description": _STEPS_DESCRIPTION,
            },
        },
        "required": required,
    }


DAY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "dayName": {"type": "string", "description": "e.g., Day 1, Day 2, or Monday"},
        "focus": {"type": "string", "description": "Main focus of the day, e.g., Chest & Triceps, or Rest"},
        "isRestDay": {"type": "boolean"},
        "exercises": {"type": "array", "items": _exercise_schema()},
    },
    "required": ["dayName", "focus", "isRestDay", "exercises"],
}

PLAN_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "planName": {"type": "string"},
        "description": {"type": "string"},
        "schedule": {"type": "array", "items": DAY_SCHEMA},
    },
    "required": ["planName", "description", "schedule"],
}

ALTERNATIVES_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "alternatives": {
            "type": "array",
            "items": _exercise_schema(
                notes_description=(
                    "Explanation of why this is a good alternative, specifically addressing injury safety if applicable."
                ),
                notes_required=True,
            ),
        },
    },
    "required": ["alternatives"],
}


class PlanExercise(Exercise):
    instructions: list[str]


class PlanDay(DayRoutine):
    exercises: list[PlanExercise]


class PlanResponse(WorkoutPlan):
    """Plan as the model must return it; every schema-required key is required here."""

    schedule: list[PlanDay] = Field(min_length=1)


class Alternative(PlanExercise):
    notes: str

    @field_validator("notes")
    @classmethod
    def _require_notes(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("alternative notes must not be empty")
        return value


class AlternativesResponse(DomainModel):
    alternatives: list[Alternative]


def response_format(name: str, schema: dict[str, Any]) -> dict[str, Any]:
    """Wrap ``schema`` in the OpenAI ``response_format`` envelope."""
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "schema": schema},
    }
