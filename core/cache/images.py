import asyncio
from typing import Awaitable, Callable

from loguru import logger

from .stores import ImageStore

ImageGenerator = Callable[[str], Awaitable[str | None]]


class ImageCache:
    """In-memory map in front of an optional persistent ``ImageStore``.

    Lookup order is memory, then the store, then ``generate``. Fresh images are
    written to memory immediately and persisted by a background task that the
    caller never awaits. Store failures are logged and the cache keeps working
    from memory. Concurrent lookups of the same name share one in-flight task.
    """

    def __init__(self, generate: ImageGenerator, store: ImageStore | None = None) -> None:
        self._generate = generate
        self._store = store
        self._memory: dict[str, str] = {}
        self._inflight: dict[str, asyncio.Task[str | None]] = {}
        self._pending_writes: set[asyncio.Task[None]] = set()

    def __contains__(self, name: object) -> bool:
        return name in self._memory

    def __len__(self) -> int:
        return len(self._memory)

    @property
    def pending_writes(self) -> int:
        return len(self._pending_writes)

    def peek(self, name: str) -> str | None:
        return self._memory.get(name)

    def clear_memory(self) -> None:
        self._memory.clear()

    async def get(self, name: str) -> str | None:
        cached = self._memory.get(name)
        if cached is not None:
            logger.debug(f"image_cache.hit tier=memory exercise={name!r}")
            return cached

        task = self._inflight.get(name)
        if task is None:
            task = asyncio.create_task(self._resolve(name))
            self._inflight[name] = task
            task.add_done_callback(lambda done, key=name: self._forget_inflight(key, done))
        else:
            logger.debug(f"image_cache.join_inflight exercise={name!r}")
        return await asyncio.shield(task)

    async def drain(self) -> None:
        """Wait for background persistent writes scheduled so far."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    def _forget_inflight(self, name: str, task: asyncio.Task[str | None]) -> None:
        if self._inflight.get(name) is task:
            del self._inflight[name]

    async def _resolve(self, name: str) -> str | None:
        stored = await self._read_store(name)
        if stored:
            self._memory[name] = stored
            logger.debug(f"image_cache.hit tier=store exercise={name!r}")
            return stored

        try:
            payload = await self._generate(name)
        except Exception as exc:  # noqa: BLE001 - generation failure means "no image"
            logger.warning(f"image_cache.generate_failed exercise={name!r} error={exc}")
            return None
        if not payload:
            logger.info(f"image_cache.miss exercise={name!r} generated=False")
            return None

        self._memory[name] = payload
        self._schedule_persist(name, payload)
        logger.debug(f"image_cache.miss exercise={name!r} generated=True size={len(payload)}")
        return payload

    async def _read_store(self, name: str) -> str | None:
        if self._store is None:
            return None
        try:
            return await self._store.get(name)
        except Exception as exc:  # noqa: BLE001 - store is optional, fall back to generation
            logger.warning(f"image_cache.store_read_failed exercise={name!r} error={exc}")
            return None

    def _schedule_persist(self, name: str, payload: str) -> None:
        if self._store is None:
            return
        task = asyncio.create_task(self._persist(name, payload))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _persist(self, name: str, payload: str) -> None:
        assert self._store is not None
        try:
            await self._store.put(name, payload)
        except Exception as exc:  # noqa: BLE001 - memory tier already holds the image
            logger.warning(f"image_cache.store_write_failed exercise={name!r} error={exc}")
            return
        logger.debug(f"image_cache.persisted exercise={name!r}")
