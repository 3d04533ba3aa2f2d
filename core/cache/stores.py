import asyncio
import hashlib
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from .base import BaseCacheManager

IMAGES_KEY = "exercise_images"


def write_atomic(path: Path, value: str) -> None:
    """Write ``value`` to ``path`` through a temporary file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(value)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


@runtime_checkable
class ImageStore(Protocol):
    """Durable key/value tier for generated images; both calls may raise."""

    async def get(self, key: str) -> str | None: ...

    async def put(self, key: str, value: str) -> None: ...


class RedisImageStore:
    """Images kept in a single redis hash, one field per exercise name."""

    def __init__(self, key: str = IMAGES_KEY, manager: type[BaseCacheManager] = BaseCacheManager) -> None:
        self.key = key
        self.manager = manager

    async def get(self, key: str) -> str | None:
        return await self.manager.get(self.key, key, strict=True)

    async def put(self, key: str, value: str) -> None:
        await self.manager.set(self.key, key, value, strict=True)


class FileImageStore:
    """One file per exercise under ``directory``; names are hashed into file names."""

    suffix = ".datauri"

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{self.suffix}"

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, self.path_for(key))

    async def put(self, key: str, value: str) -> None:
        await asyncio.to_thread(write_atomic, self.path_for(key), value)

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
