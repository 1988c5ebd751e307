from datetime import datetime, timezone
from threading import Thread

from app.utils.model_status import ALGORITHMS, ModelStatusRegistry


def test_current_snapshot():
    registry = ModelStatusRegistry(version="3.1.0")
    status = registry.current().to_dict()
    assert status["version"] == "3.1.0"
    assert status["status"] == "healthy"
    assert status["algorithms"] == list(ALGORITHMS)


def test_refresh_replaces_snapshot():
    registry = ModelStatusRegistry()
    before = registry.current()
    stamp = datetime(2030, 1, 1, tzinfo=timezone.utc)

    after = registry.refresh(now=stamp)

    assert after is not before
    assert after.last_update == stamp
    assert before.last_update != stamp
    assert registry.current() is after


def test_concurrent_refresh_leaves_complete_snapshot():
    registry = ModelStatusRegistry(version="2.0.0")
    threads = [Thread(target=registry.refresh) for _ in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    status = registry.current()
    assert status.version == "2.0.0"
    assert status.algorithms == ALGORITHMS


def test_metrics_include_performance_blocks():
    metrics = ModelStatusRegistry().metrics()
    assert metrics["performance"]["accuracy"] == "87%"
    assert metrics["data_quality"]["timeliness"] == "Real-time"
