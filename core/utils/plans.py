from uuid import uuid4

from core.schemas import DayRoutine, Exercise, WorkoutPlan


def _same_exercise(candidate: Exercise, original: Exercise) -> bool:
    if candidate is original:
        return True
    return original.id is not None and candidate.id == original.id


def swap_exercise(plan: WorkoutPlan, original: Exercise, replacement: Exercise) -> WorkoutPlan:
    """Return a plan where ``original`` is replaced by ``replacement``.

    Matching is by identity (or shared transient id), never by content, so two
    identical exercises on different days are swapped independently. Untouched
    days are reused; ``plan`` itself is left as is.
    """
    changed = False
    schedule: list[DayRoutine] = []
    for day in plan.schedule:
        if not any(_same_exercise(ex, original) for ex in day.exercises):
            schedule.append(day)
            continue
        exercises = [replacement if _same_exercise(ex, original) else ex for ex in day.exercises]
        schedule.append(day.model_copy(update={"exercises": exercises}))
        changed = True
    if not changed:
        return plan
    return plan.model_copy(update={"schedule": schedule})


def replace_exercise_at(plan: WorkoutPlan, day_index: int, position: int, replacement: Exercise) -> WorkoutPlan:
    if not 0 <= day_index < len(plan.schedule):
        raise IndexError(f"day index {day_index} out of range")
    day = plan.schedule[day_index]
    if not 0 <= position < len(day.exercises):
        raise IndexError(f"exercise position {position} out of range for {day.day_name!r}")
    exercises = list(day.exercises)
    exercises[position] = replacement
    schedule = list(plan.schedule)
    schedule[day_index] = day.model_copy(update={"exercises": exercises})
    return plan.model_copy(update={"schedule": schedule})


def assign_exercise_ids(plan: WorkoutPlan) -> WorkoutPlan:
    """Give every exercise without a transient id a fresh one."""
    if all(ex.id for _, _, ex in plan.iter_exercises()):
        return plan
    schedule = [
        day.model_copy(
            update={"exercises": [ex if ex.id else ex.model_copy(update={"id": uuid4().hex}) for ex in day.exercises]}
        )
        for day in plan.schedule
    ]
    return plan.model_copy(update={"schedule": schedule})


def find_exercise(plan: WorkoutPlan, exercise_id: str) -> Exercise | None:
    for _, _, exercise in plan.iter_exercises():
        if exercise.id == exercise_id:
            return exercise
    return None
