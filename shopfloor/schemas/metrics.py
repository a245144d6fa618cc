from pydantic import BaseModel


class AggregateMetrics(BaseModel):
    avg_ms: float
    min_ms: float
    max_ms: float
    median_ms: float
    p95_ms: float
    count: int


class BenchmarkReport(BaseModel):
    operation: str
    metrics: AggregateMetrics
    summary: str
    recommendations: list[str]
