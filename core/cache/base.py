import json
from json import JSONDecodeError
from typing import Any, Awaitable, Callable, ClassVar, cast

from loguru import logger
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from config.app_settings import settings


class BaseCacheManager:
    _redis: ClassVar[Redis | None] = None

    @classmethod
    def _create_client(cls) -> Redis:
        return from_url(
            url=settings.REDIS_URL,
            db=settings.REDIS_DB,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        )

    @classmethod
    def _client(cls) -> Redis:
        if BaseCacheManager._redis is None:
            BaseCacheManager._redis = cls._create_client()
        return BaseCacheManager._redis

    @classmethod
    async def _reset_client(cls) -> None:
        client = BaseCacheManager._redis
        if client is None:
            return
        try:
            await client.aclose()
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"Redis client close failed: {exc}")
        finally:
            BaseCacheManager._redis = None

    @classmethod
    async def _with_client(
        cls,
        func: Callable[[Redis], Awaitable[Any]],
        *,
        on_error: Callable[[Exception], Any] | None = None,
    ) -> Any:
        """Run ``func`` once; a failed client is dropped so the next call reconnects.

        Without ``on_error`` the ``RedisError`` propagates to the caller.
        """
        client = cls._client()
        try:
            return await func(client)
        except RedisError as exc:
            logger.warning(f"Redis operation failed: {exc}")
            await cls._reset_client()
            if on_error is None:
                raise
            return on_error(exc)

    @classmethod
    def _add_prefix(cls, key: str) -> str:
        return f"{settings.CACHE_PREFIX}:{key}"

    @classmethod
    async def close_pool(cls) -> None:
        try:
            await cls._reset_client()
            logger.info("Redis connection closed.")
        except Exception as e:
            logger.error(f"Error closing Redis connection: {e}")

    @classmethod
    async def get(cls, key: str, field: str, *, strict: bool = False) -> str | None:
        def _op(client: Redis) -> Awaitable[str | None]:
            return cast(Awaitable[str | None], client.hget(cls._add_prefix(key), field))

        if strict:
            return await cls._with_client(_op)
        return await cls._with_client(
            _op,
            on_error=lambda e: logger.error(f"Redis GET error [{key}:{field}]: {e}") or None,
        )

    @classmethod
    async def set(cls, key: str, field: str, value: str, *, strict: bool = False) -> None:
        def _op(client: Redis) -> Awaitable[int]:
            return cast(Awaitable[int], client.hset(cls._add_prefix(key), field, value))

        if strict:
            await cls._with_client(_op)
            return
        await cls._with_client(_op, on_error=lambda e: logger.error(f"Redis SET error [{key}:{field}]: {e}"))

    @classmethod
    async def get_json(cls, key: str, field: str) -> dict[str, Any] | None:
        raw = await cls.get(key, field)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except (JSONDecodeError, TypeError) as e:
            logger.error(f"Invalid JSON [{key}:{field}]: {e}")
            return None
        if not isinstance(data, dict):
            logger.error(f"Unexpected JSON payload [{key}:{field}]: {type(data).__name__}")
            return None
        return data

    @classmethod
    async def set_json(cls, key: str, field: str, data: dict[str, Any]) -> None:
        try:
            await cls.set(key, field, json.dumps(data))
        except (TypeError, ValueError) as e:
            logger.error(f"Redis SET JSON error [{key}:{field}]: {e}")
