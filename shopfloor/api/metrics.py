from fastapi import APIRouter, Depends, Query

from shopfloor.core.metrics import POSTGRES_SEARCH, MetricsRecorder, get_metrics
from shopfloor.schemas.metrics import AggregateMetrics, BenchmarkReport

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("/search", response_model=dict[str, AggregateMetrics])
def search_performance(metrics: MetricsRecorder = Depends(get_metrics)):
    """Aggregate latency per search backend (only Postgres is wired up)."""
    return {"postgres": metrics.aggregate(POSTGRES_SEARCH)}


@router.get("/recent", response_model=dict[str, AggregateMetrics])
def recent_metrics(
    minutes: int = Query(default=5, ge=1, le=60),
    metrics: MetricsRecorder = Depends(get_metrics),
):
    return metrics.recent_summary(minutes)


@router.get("/report", response_model=BenchmarkReport)
def benchmark_report(metrics: MetricsRecorder = Depends(get_metrics)):
    return metrics.benchmark_report(POSTGRES_SEARCH)


@router.delete("")
def clear_metrics(metrics: MetricsRecorder = Depends(get_metrics)):
    metrics.clear()
    return {"success": True}
