from fastapi import FastAPI
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator


def setup_metrics(app: FastAPI) -> Instrumentator:
    """Instrument request counts/latencies and expose them on /metrics.

    Each app gets its own registry so several apps can live in one process.
    """
    instrumentator = Instrumentator(
        should_group_status_codes=False,
        excluded_handlers=["/metrics"],
        registry=CollectorRegistry(),
    )
    instrumentator.instrument(app).expose(app, include_in_schema=False)
    return instrumentator
