import json
from pathlib import Path

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from config.app_settings import settings
from core.cache.base import BaseCacheManager
from core.cache.preferences import (
    PREFERENCES_FIELD,
    PREFERENCES_KEY,
    FilePreferencesStore,
    PreferencesCacheManager,
    PreferencesStore,
)
from core.cache.stores import IMAGES_KEY, FileImageStore, ImageStore, RedisImageStore
from core.enums import GoalType, SplitType
from core.schemas import UserPreferences


class FakeRedis:
    def __init__(self, *, fail: bool = False) -> None:
        self.hashes: dict[str, dict[str, str]] = {}
        self.fail = fail
        self.closed = False

    def _check(self) -> None:
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def hget(self, key: str, field: str) -> str | None:
        self._check()
        return self.hashes.get(key, {}).get(field)

    async def hset(self, key: str, field: str, value: str) -> int:
        self._check()
        self.hashes.setdefault(key, {})[field] = value
        return 1

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(BaseCacheManager, "_redis", fake)
    return fake


def test_stores_satisfy_protocol(tmp_path: Path) -> None:
    assert isinstance(RedisImageStore(), ImageStore)
    assert isinstance(FileImageStore(tmp_path), ImageStore)


@pytest.mark.asyncio
async def test_file_store_round_trip(tmp_path: Path) -> None:
    store = FileImageStore(tmp_path / "images")

    assert await store.get("Goblet Squat") is None
    await store.put("Goblet Squat", "data:image/png;base64,aW1n")

    assert await store.get("Goblet Squat") == "data:image/png;base64,aW1n"
    files = list((tmp_path / "images").iterdir())
    assert files == [store.path_for("Goblet Squat")]
    assert files[0].suffix == ".datauri"


@pytest.mark.asyncio
async def test_file_store_hashes_unsafe_names(tmp_path: Path) -> None:
    store = FileImageStore(tmp_path)

    await store.put("Pull-Up / Chin-Up", "a")
    await store.put("pull-up / chin-up", "b")

    assert await store.get("Pull-Up / Chin-Up") == "a"
    assert await store.get("pull-up / chin-up") == "b"
    assert all(path.parent == tmp_path for path in tmp_path.iterdir())


@pytest.mark.asyncio
async def test_file_store_overwrite_leaves_no_temp_files(tmp_path: Path) -> None:
    store = FileImageStore(tmp_path)

    await store.put("Plank", "first")
    await store.put("Plank", "second")

    assert await store.get("Plank") == "second"
    assert [path.name for path in tmp_path.iterdir()] == [store.path_for("Plank").name]


@pytest.mark.asyncio
async def test_redis_store_uses_prefixed_hash(fake_redis: FakeRedis) -> None:
    store = RedisImageStore()

    await store.put("Plank", "data:image/png;base64,aW1n")

    assert fake_redis.hashes == {f"{settings.CACHE_PREFIX}:{IMAGES_KEY}": {"Plank": "data:image/png;base64,aW1n"}}
    assert await store.get("Plank") == "data:image/png;base64,aW1n"
    assert await store.get("Dip") is None


@pytest.mark.asyncio
async def test_redis_store_raises_and_drops_client(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = FakeRedis(fail=True)
    monkeypatch.setattr(BaseCacheManager, "_redis", fake)

    with pytest.raises(RedisConnectionError):
        await RedisImageStore().get("Plank")

    assert fake.closed is True
    assert BaseCacheManager._redis is None


@pytest.mark.asyncio
async def test_lenient_manager_calls_swallow_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(BaseCacheManager, "_redis", FakeRedis(fail=True))
    assert await BaseCacheManager.get("k", "f") is None

    monkeypatch.setattr(BaseCacheManager, "_redis", FakeRedis(fail=True))
    await BaseCacheManager.set("k", "f", "v")


@pytest.mark.asyncio
async def test_get_json_ignores_malformed_payloads(fake_redis: FakeRedis) -> None:
    await BaseCacheManager.set("k", "broken", "{not json")
    await BaseCacheManager.set("k", "list", "[1, 2]")

    assert await BaseCacheManager.get_json("k", "broken") is None
    assert await BaseCacheManager.get_json("k", "list") is None
    assert await BaseCacheManager.get_json("k", "missing") is None


@pytest.mark.asyncio
async def test_close_pool_resets_client(fake_redis: FakeRedis) -> None:
    await BaseCacheManager.close_pool()

    assert fake_redis.closed is True
    assert BaseCacheManager._redis is None


@pytest.mark.asyncio
async def test_preferences_default_when_nothing_saved(fake_redis: FakeRedis) -> None:
    assert await PreferencesCacheManager.load() == UserPreferences()


@pytest.mark.asyncio
async def test_preferences_round_trip(fake_redis: FakeRedis) -> None:
    prefs = UserPreferences(
        days_per_week=5,
        goal=GoalType.MAX_STRENGTH,
        split_type=SplitType.FULL_BODY,
        injuries="bad left knee",
    )

    await PreferencesCacheManager.save(prefs)

    raw = fake_redis.hashes[f"{settings.CACHE_PREFIX}:{PREFERENCES_KEY}"][PREFERENCES_FIELD]
    assert json.loads(raw)["daysPerWeek"] == 5
    assert await PreferencesCacheManager.load() == prefs


@pytest.mark.asyncio
async def test_preferences_merge_partial_payload_over_defaults(fake_redis: FakeRedis) -> None:
    await BaseCacheManager.set(PREFERENCES_KEY, PREFERENCES_FIELD, json.dumps({"injuries": "wrist pain"}))

    prefs = await PreferencesCacheManager.load()

    assert prefs.injuries == "wrist pain"
    assert prefs.days_per_week == 4


@pytest.mark.asyncio
async def test_preferences_invalid_payload_falls_back(fake_redis: FakeRedis) -> None:
    await BaseCacheManager.set(PREFERENCES_KEY, PREFERENCES_FIELD, json.dumps({"daysPerWeek": "many"}))

    assert await PreferencesCacheManager.load() == UserPreferences()


def test_preference_stores_satisfy_protocol(tmp_path: Path) -> None:
    assert isinstance(PreferencesCacheManager, PreferencesStore)
    assert isinstance(FilePreferencesStore(tmp_path / "prefs.json"), PreferencesStore)


@pytest.mark.asyncio
async def test_file_preferences_round_trip(tmp_path: Path) -> None:
    store = FilePreferencesStore(tmp_path / "nested" / "preferences.json")
    prefs = UserPreferences(days_per_week=3, split_type=SplitType.FULL_BODY, focus_areas="rear delts")

    assert await store.load() == UserPreferences()
    await store.save(prefs)

    assert json.loads(store.path.read_text(encoding="utf-8"))["focusAreas"] == "rear delts"
    assert await FilePreferencesStore(store.path).load() == prefs
    assert [path.name for path in store.path.parent.iterdir()] == ["preferences.json"]


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["{broken", "[1, 2]", '{"daysPerWeek": "many"}'])
async def test_file_preferences_bad_content_falls_back(tmp_path: Path, content: str) -> None:
    path = tmp_path / "preferences.json"
    path.write_text(content, encoding="utf-8")

    assert await FilePreferencesStore(path).load() == UserPreferences()


@pytest.mark.asyncio
async def test_file_preferences_partial_payload_merges(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text(json.dumps({"injuries": "wrist pain"}), encoding="utf-8")

    prefs = await FilePreferencesStore(path).load()

    assert prefs.injuries == "wrist pain"
    assert prefs.days_per_week == 4


@pytest.mark.asyncio
async def test_file_preferences_write_failure_is_logged(tmp_path: Path) -> None:
    target = tmp_path / "preferences.json"
    target.mkdir()

    await FilePreferencesStore(target).save(UserPreferences())

    assert target.is_dir()
    assert list(target.iterdir()) == []
    assert [path.name for path in tmp_path.iterdir()] == ["preferences.json"]
