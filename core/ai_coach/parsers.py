import json
import re
from typing import Any
from uuid import uuid4

from loguru import logger
from pydantic import ValidationError

from core.exceptions import AlternativesError, GenerationError
from core.schemas import Exercise, WorkoutPlan
from core.utils.plans import assign_exercise_ids
from .schemas import MAX_ALTERNATIVES, AlternativesResponse, PlanResponse

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.S | re.I)


def _strip_fences(text: str) -> str:
    """Return ``text`` without a surrounding markdown code fence."""
    stripped = text.strip()
    match = _FENCE_PATTERN.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def _load_json(text: str | None, *, error_cls: type[GenerationError], context: str) -> Any:
    if not text or not text.strip():
        raise error_cls(f"Empty response for {context}", reason="empty_response", raw=text)
    cleaned = _strip_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning(f"parse.invalid_json context={context} error={exc} preview={cleaned[:120]!r}")
        raise error_cls(f"Invalid JSON for {context}: {exc}", reason="invalid_json", raw=text) from exc


def parse_plan_json(text: str | None) -> WorkoutPlan:
    """Validate and deserialize a workout plan returned by the model."""
    data = _load_json(text, error_cls=GenerationError, context="plan")
    try:
        PlanResponse.model_validate(data)
        plan = WorkoutPlan.model_validate(data)
    except ValidationError as exc:
        logger.warning(f"parse.schema_mismatch context=plan errors={exc.error_count()}")
        raise GenerationError(f"Plan does not match schema: {exc}", reason="schema_mismatch", raw=text) from exc
    return assign_exercise_ids(plan)


def parse_alternatives_json(text: str | None) -> list[Exercise]:
    """Validate alternatives; an empty reply means the model found none."""
    if not text or not text.strip():
        return []
    data = _load_json(text, error_cls=AlternativesError, context="alternatives")
    if isinstance(data, list):
        data = {"alternatives": data}
    try:
        response = AlternativesResponse.model_validate(data)
    except ValidationError as exc:
        logger.warning(f"parse.schema_mismatch context=alternatives errors={exc.error_count()}")
        raise AlternativesError(
            f"Alternatives do not match schema: {exc}", reason="schema_mismatch", raw=text
        ) from exc

    alternatives = list(response.alternatives)
    if len(alternatives) > MAX_ALTERNATIVES:
        logger.debug(f"parse.alternatives_truncated received={len(alternatives)} kept={MAX_ALTERNATIVES}")
        alternatives = alternatives[:MAX_ALTERNATIVES]
    return [alt.model_copy(update={"id": alt.id or uuid4().hex}) for alt in alternatives]
