"""Request observability: request ids, structured logging hooks and Prometheus metrics."""
from typing import Optional
from uuid import uuid4
import time

from fastapi import APIRouter, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.routing import Route

from config import get_config

UNROUTED_PATH = "unrouted"

request_counter = Counter(
    "sentiment_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

request_latency = Histogram(
    "sentiment_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 15),
)

external_call_outcomes = Counter(
    "sentiment_external_call_outcomes_total",
    "External call outcomes",
    ["system", "result"],
)

analyses_counter = Counter(
    "sentiment_analyses_total",
    "Completed analyses by engine and resulting label",
    ["source", "sentiment"],
)

metrics_router = APIRouter()


@metrics_router.get("/metrics")
async def metrics_endpoint():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def route_label(request: Request) -> str:
    """Path template of the matched API route, or one shared label otherwise."""
    route = request.scope.get("route")
    if isinstance(route, Route):
        return route.path
    # Static files, unknown paths and requests rejected before routing
    return UNROUTED_PATH


def record_request_metrics(request: Request, status_code: int, duration: float):
    path = route_label(request)
    method = request.method
    request_counter.labels(method=method, path=path, status=str(status_code)).inc()
    request_latency.labels(method=method, path=path).observe(duration)


def record_external_call(system: str, result: str):
    external_call_outcomes.labels(system=system, result=result).inc()


def record_analysis(source: str, sentiment: str):
    analyses_counter.labels(source=source, sentiment=sentiment).inc()


def request_id_for(request: Request) -> str:
    header = get_config().REQUEST_ID_HEADER
    return request.headers.get(header) or str(uuid4())


def request_timer() -> float:
    return time.perf_counter()


def elapsed(start_time: Optional[float]) -> float:
    if start_time is None:
        return 0.0
    return time.perf_counter() - start_time
