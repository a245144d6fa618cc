import pytest
from fastapi.testclient import TestClient

from shopfloor.core.metrics import MetricsRecorder
from shopfloor.main import app


def test_aggregate_empty():
    m = MetricsRecorder()
    assert m.aggregate("postgres-search") == {
        "avg_ms": 0.0, "min_ms": 0.0, "max_ms": 0.0, "median_ms": 0.0, "p95_ms": 0.0, "count": 0,
    }


def test_aggregate_statistics():
    m = MetricsRecorder()
    for d in [40.0, 10.0, 30.0, 20.0]:
        m.record("postgres-search", d)
    m.record("other", 1000.0)

    agg = m.aggregate("postgres-search")
    assert agg["count"] == 4
    assert agg["avg_ms"] == 25.0
    assert agg["min_ms"] == 10.0
    assert agg["max_ms"] == 40.0
    assert agg["median_ms"] == 25.0
    assert agg["p95_ms"] == 40.0


def test_oldest_samples_dropped_past_capacity():
    m = MetricsRecorder(max_samples=3)
    for d in [1.0, 2.0, 3.0, 4.0]:
        m.record("op", d)
    assert [s.duration_ms for s in m.history()] == [2.0, 3.0, 4.0]


def test_measure_records_success_only():
    m = MetricsRecorder()
    with m.measure("op", query="steel"):
        pass
    assert m.history("op")[0].metadata == {"query": "steel"}

    with pytest.raises(RuntimeError):
        with m.measure("op"):
            raise RuntimeError("boom")
    assert m.aggregate("op")["count"] == 1


def test_recent_summary_groups_by_operation():
    m = MetricsRecorder()
    m.record("a", 1.0)
    m.record("b", 2.0)
    m.record("b", 4.0)
    summary = m.recent_summary(5)
    assert set(summary) == {"a", "b"}
    assert summary["b"]["avg_ms"] == 3.0


def test_benchmark_report_flags_slow_p95():
    m = MetricsRecorder(slow_p95_ms=50)
    m.record("postgres-search", 120.0)
    report = m.benchmark_report()
    assert report["metrics"]["count"] == 1
    assert "Average: 120.00ms" in report["summary"]
    assert len(report["recommendations"]) == 1


def test_metrics_endpoints(db_session):
    client = TestClient(app)
    client.get("/articles?search=steel")

    r = client.get("/metrics/search")
    assert r.status_code == 200
    assert r.json()["postgres"]["count"] == 1

    r = client.get("/metrics/recent?minutes=5")
    assert r.json()["postgres-search"]["count"] == 1

    r = client.get("/metrics/report")
    assert r.json()["operation"] == "postgres-search"

    assert client.delete("/metrics").json() == {"success": True}
    assert client.get("/metrics/search").json()["postgres"]["count"] == 0
