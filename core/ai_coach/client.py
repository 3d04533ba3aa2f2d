from time import perf_counter
from typing import Any, Mapping

from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from config.app_settings import settings
from core.exceptions import AlternativesError, GenerationError
from core.schemas import Exercise, UserPreferences, WorkoutPlan
from .parsers import parse_alternatives_json, parse_plan_json
from .prompts import SYSTEM_MESSAGE, build_alternatives_prompt, build_image_prompt, build_plan_prompt
from .schemas import ALTERNATIVES_SCHEMA, PLAN_SCHEMA, response_format

DEFAULT_IMAGE_MIME = "image/png"


class GenerationClient:
    """Schema-constrained text and image requests against an OpenAI-compatible API."""

    def __init__(
        self,
        client: AsyncOpenAI | Any | None = None,
        *,
        text_model: str | None = None,
        image_model: str | None = None,
    ) -> None:
        self._client = client
        self.text_model = text_model or settings.TEXT_MODEL
        self.image_model = image_model or settings.IMAGE_MODEL

    @property
    def client(self) -> AsyncOpenAI | Any:
        if self._client is None:
            kwargs: dict[str, Any] = {
                "api_key": settings.LLM_API_KEY or None,
                "base_url": settings.LLM_API_URL or None,
            }
            if settings.LLM_TIMEOUT is not None:
                kwargs["timeout"] = settings.LLM_TIMEOUT
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def generate_plan(self, prefs: UserPreferences) -> WorkoutPlan:
        prompt = build_plan_prompt(prefs)
        try:
            text = await self._complete_json(prompt, schema_name="workout_plan", schema=PLAN_SCHEMA)
        except OpenAIError as exc:
            logger.error(f"llm.plan transport_failed model={self.text_model} error={exc}")
            raise GenerationError(f"Plan generation failed: {exc}", reason="transport") from exc
        plan = parse_plan_json(text)
        logger.info(f"llm.plan generated name={plan.plan_name!r} days={len(plan.schedule)}")
        return plan

    async def generate_alternatives(self, exercise: Exercise, injuries: str) -> list[Exercise]:
        prompt = build_alternatives_prompt(exercise, injuries)
        try:
            text = await self._complete_json(prompt, schema_name="exercise_alternatives", schema=ALTERNATIVES_SCHEMA)
        except OpenAIError as exc:
            logger.error(f"llm.alternatives transport_failed exercise={exercise.name!r} error={exc}")
            raise AlternativesError(f"Alternatives request failed: {exc}", reason="transport") from exc
        alternatives = parse_alternatives_json(text)
        logger.info(f"llm.alternatives exercise={exercise.name!r} count={len(alternatives)}")
        return alternatives

    async def generate_image(self, exercise_name: str) -> str | None:
        """Return a ``data:`` URI for the exercise or ``None``; never raises."""
        kwargs: dict[str, Any] = {
            "model": self.image_model,
            "prompt": build_image_prompt(exercise_name),
            "n": 1,
            "size": settings.IMAGE_SIZE,
        }
        if settings.IMAGE_RESPONSE_FORMAT:
            kwargs["response_format"] = settings.IMAGE_RESPONSE_FORMAT
        start = perf_counter()
        try:
            response = await self.client.images.generate(**kwargs)
        except Exception as exc:  # noqa: BLE001 - image failures degrade to a placeholder
            logger.warning(f"llm.image failed exercise={exercise_name!r} error={exc}")
            return None
        latency = (perf_counter() - start) * 1000.0

        mime_type = self._image_mime_type(response)
        for item in getattr(response, "data", None) or []:
            data = item.get("b64_json") if isinstance(item, Mapping) else getattr(item, "b64_json", None)
            if data:
                logger.debug(f"llm.image generated exercise={exercise_name!r} mime={mime_type} latency_ms={latency:.0f}")
                return f"data:{mime_type};base64,{data}"
        logger.warning(f"llm.image empty exercise={exercise_name!r} latency_ms={latency:.0f}")
        return None

    async def _complete_json(self, prompt: str, *, schema_name: str, schema: dict[str, Any]) -> str:
        kwargs: dict[str, Any] = {
            "model": self.text_model,
            "messages": [
                {"role": "system", "content": SYSTEM_MESSAGE.strip()},
                {"role": "user", "content": prompt},
            ],
            "response_format": response_format(schema_name, schema),
            "stream": False,
        }
        if settings.LLM_TEMPERATURE is not None:
            kwargs["temperature"] = settings.LLM_TEMPERATURE

        logger.debug(
            "llm.request model={} schema={} user_len={}".format(self.text_model, schema_name, len(prompt.strip()))
        )
        start = perf_counter()
        try:
            response = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as exc:
            latency = (perf_counter() - start) * 1000.0
            logger.warning(f"llm.response.error model={self.text_model} latency_ms={latency:.0f} error={exc}")
            raise
        latency = (perf_counter() - start) * 1000.0
        meta = self._response_metadata(response)
        logger.debug(
            (
                "llm.response model={} choices={} finish_reason={} content_len={} "
                "prompt_tokens={} completion_tokens={} latency_ms={:.0f}"
            ).format(
                self.text_model,
                meta["choices"],
                meta["finish_reason"],
                meta["content_len"],
                meta["prompt_tokens"],
                meta["completion_tokens"],
                latency,
            )
        )
        if settings.LOG_LLM_RAW:
            logger.debug(f"llm.response.raw model={self.text_model} raw_first_200={meta['content'][:200]!r}")
        return meta["content"]

    @staticmethod
    def _extract_message_content(content: Any) -> str:
        if content is None:
            return ""
        if isinstance(content, str):
            return content.strip()
        if isinstance(content, list):
            parts: list[str] = []
            for part in content:
                text = part.get("text") if isinstance(part, Mapping) else getattr(part, "text", None)
                if isinstance(text, str) and text.strip():
                    parts.append(text.strip())
            return "".join(parts)
        return str(content).strip()

    @classmethod
    def _response_metadata(cls, response: Any) -> dict[str, Any]:
        choices = getattr(response, "choices", None) or []
        first_choice = choices[0] if choices else None
        message = getattr(first_choice, "message", None)
        content = cls._extract_message_content(getattr(message, "content", None))
        usage = getattr(response, "usage", None)
        prompt_tokens = getattr(usage, "prompt_tokens", None)
        completion_tokens = getattr(usage, "completion_tokens", None)
        finish_reason = getattr(first_choice, "finish_reason", "") if first_choice else ""
        return {
            "choices": len(choices),
            "finish_reason": finish_reason or "",
            "content": content,
            "content_len": len(content),
            "prompt_tokens": prompt_tokens if prompt_tokens is not None else "na",
            "completion_tokens": completion_tokens if completion_tokens is not None else "na",
        }

    @staticmethod
    def _image_mime_type(response: Any) -> str:
        output_format = getattr(response, "output_format", None)
        if isinstance(output_format, str) and output_format:
            fmt = output_format.lower()
            return f"image/{'jpeg' if fmt == 'jpg' else fmt}"
        return DEFAULT_IMAGE_MIME
