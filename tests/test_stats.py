"""CallStats aggregation."""

import math
import threading

import pytest

from dioxide.stats import CallStats, call_key


def test_call_key():
    assert call_key("/user", "login") == "/user#login"


def test_success_then_error():
    stats = CallStats()
    key = call_key("/user", "login")
    stats.record_success(key, 100)
    stats.record_success(key, 300)

    entry = stats.snapshot()["/user#login"]
    assert entry.invocation_count == 2
    assert entry.success_count == 2
    assert entry.error_count == 0
    assert entry.average_millis == 200

    stats.record_error(key, 50)
    entry = stats.snapshot()["/user#login"]
    assert entry.invocation_count == 3
    assert entry.success_count == 2
    assert entry.error_count == 1
    assert entry.average_millis == 150


def test_keys_are_independent():
    stats = CallStats()
    stats.record_success("/user#login", 10)
    stats.record_error("/user#logout", 20)
    snap = stats.snapshot()
    assert set(snap) == {"/user#login", "/user#logout"}
    assert snap["/user#login"].error_count == 0
    assert snap["/user#logout"].success_count == 0
    assert len(stats) == 2


def test_zero_and_negative_elapsed_accumulate():
    stats = CallStats()
    stats.record_success("k#m", 0)
    stats.record_error("k#m", -10)
    entry = stats.snapshot()["k#m"]
    assert entry.total_elapsed_millis == -10
    assert entry.average_millis == -5


def test_snapshot_is_a_copy():
    stats = CallStats()
    stats.record_success("k#m", 10)
    snap = stats.snapshot()
    snap["k#m"].invocation_count = 99
    with pytest.raises(TypeError):
        snap["other#m"] = snap["k#m"]
    assert stats.snapshot()["k#m"].invocation_count == 1
    assert "other#m" not in stats.snapshot()


def test_snapshot_does_not_track_later_updates():
    stats = CallStats()
    stats.record_success("k#m", 10)
    snap = stats.snapshot()
    stats.record_success("k#m", 10)
    assert snap["k#m"].invocation_count == 1


def test_empty_entry_average_is_nan():
    from dioxide.models.stats import CallStatsEntry
    assert math.isnan(CallStatsEntry().average_millis)


def test_describe():
    stats = CallStats()
    stats.record_success("/user#login", 100)
    stats.record_error("/user#login", 200)
    stats.record_success("/a#b", 5)
    assert stats.describe() == (
        "RPC Stats:\n"
        "  /a#b:\n"
        "    invocation count: 1\n"
        "    success count: 1\n"
        "    error count: 0\n"
        "    average millis: 5.0\n"
        "  /user#login:\n"
        "    invocation count: 2\n"
        "    success count: 1\n"
        "    error count: 1\n"
        "    average millis: 150.0\n"
    )


def test_describe_empty():
    assert CallStats().describe() == "RPC Stats:\n"


def test_concurrent_updates_are_not_lost():
    stats = CallStats()

    def worker():
        for _ in range(1000):
            stats.record_success("k#m", 1)
            stats.record_error("k#m", 1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    entry = stats.snapshot()["k#m"]
    assert entry.invocation_count == 16000
    assert entry.success_count == 8000
    assert entry.error_count == 8000
    assert entry.invocation_count == entry.success_count + entry.error_count
    assert entry.total_elapsed_millis == 16000
