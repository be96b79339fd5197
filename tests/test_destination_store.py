"""Tests for cached destination search."""

import json

import pytest

from travel_desk.adapters.cache import TimestampedCache
from travel_desk.adapters.storage import FileStorage, MemoryStorage
from travel_desk.domain.errors import ApiError
from travel_desk.services import DestinationStore

TTL = 6 * 60 * 60

PARIS = {
    "id": 1,
    "slug": "paris-fr",
    "city_id": 10,
    "city": "Paris",
    "state": None,
    "country": "França",
    "label": "Paris, França",
}


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def cache(storage, clock):
    return TimestampedCache(
        storage=storage,
        storage_key="travel-destinations-cache",
        ttl_seconds=TTL,
        max_size=20,
        name="destinations",
        clock=clock,
    )


@pytest.fixture
def store(api, cache):
    return DestinationStore(api=api, cache=cache, limit=10)


def test_blank_query_returns_nothing_without_request(store, http):
    assert store.search("") == []
    assert store.search("   ") == []
    assert http.calls == []


def test_search_calls_api_with_raw_query_and_limit(store, http):
    http.reply(200, {"data": [PARIS]})

    results = store.search("  Paris ")

    assert [destination.city for destination in results] == ["Paris"]
    assert results[0].city_id == 10
    assert http.calls[0].url.endswith("/destinations")
    assert http.calls[0].params == {"q": "  Paris ", "limit": 10}


def test_equivalent_queries_hit_the_cache(store, http):
    http.reply(200, {"data": [PARIS]})

    first = store.search("Paris")
    second = store.search("  paris  ")

    assert first == second
    assert len(http.calls) == 1


def test_empty_results_are_cached(store, http, cache):
    http.reply(200, {"data": []})

    assert store.search("atlantis") == []
    assert store.search("atlantis") == []

    assert len(http.calls) == 1
    assert cache.get("atlantis") == []


def test_expired_entry_triggers_exactly_one_new_request(store, http, clock):
    http.reply(200, {"data": [PARIS]})
    store.search("paris")

    clock.advance(TTL - 1)
    store.search("paris")
    assert len(http.calls) == 1

    clock.advance(1)
    http.reply(200, {"data": [PARIS]})
    store.search("paris")
    store.search("paris")
    assert len(http.calls) == 2


def test_oldest_query_is_evicted_after_twenty(store, http, cache, clock):
    for index in range(21):
        http.reply(200, {"data": []})
        store.search(f"city {index}")
        clock.advance(1)

    assert cache.size() == 20
    assert cache.get("city 0") is None
    assert cache.get("city 20") == []


def test_cache_is_persisted_to_storage(store, http, storage, clock):
    http.reply(200, {"data": [PARIS]})
    store.search("Paris")

    blob = json.loads(storage.get_item("travel-destinations-cache"))
    assert blob["paris"]["timestamp"] == clock.now
    assert blob["paris"]["data"][0]["slug"] == "paris-fr"


def test_persisted_cache_survives_a_restart(api, http, tmp_path, clock):
    def build_store():
        cache = TimestampedCache(
            storage=FileStorage(tmp_path),
            storage_key="travel-destinations-cache",
            ttl_seconds=TTL,
            max_size=20,
            clock=clock,
        )
        return DestinationStore(api=api, cache=cache)

    http.reply(200, {"data": [PARIS]})
    build_store().search("paris")

    results = build_store().search("PARIS")

    assert results[0].label == "Paris, França"
    assert len(http.calls) == 1


def test_failure_is_raised_unchanged_and_not_cached(store, http, cache):
    http.reply(500, {"message": "Falha"})

    with pytest.raises(ApiError) as exc_info:
        store.search("paris")

    assert exc_info.value.status == 500
    assert cache.get("paris") is None
    assert not store.loading


def test_unexpected_shape_yields_empty_list(store, http):
    http.reply(200, {"results": [PARIS]})
    assert store.search("paris") == []

    http.reply(200, {"data": ["not-an-object", PARIS]})
    assert [destination.slug for destination in store.search("lyon")] == ["paris-fr"]


def test_loading_flag_is_toggled_around_the_request(store, http):
    seen = []
    store.subscribe(lambda name, value: seen.append((name, value)))
    http.reply(200, {"data": []})

    store.search("rome")

    assert seen == [("loading", True), ("loading", False)]
    assert not store.loading


def test_search_log_carries_cache_statistics(store, http, caplog):
    http.reply(200, {"data": [PARIS]})

    with caplog.at_level("DEBUG", logger="travel_desk.services.destination_store"):
        store.search("paris")

    (record,) = [r for r in caplog.records if r.getMessage() == "Destination search"]
    assert record.results == 1
    assert record.cache["size"] == 1
    assert record.cache["misses"] == 1
