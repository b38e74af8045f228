"""
Core modules for fetch_pipeline.
"""
from .pipeline import (
    DEFAULT_PRIORITY,
    EXECUTOR_SELECTION_PRIORITY,
    REQUEST_FINALIZATION_PRIORITY,
    InterceptorEntry,
    InterceptorPipeline,
    order_entries,
)
from .url_builder import build_url, join_base_and_path, resolve_request_url

__all__ = [
    "DEFAULT_PRIORITY",
    "EXECUTOR_SELECTION_PRIORITY",
    "REQUEST_FINALIZATION_PRIORITY",
    "InterceptorEntry",
    "InterceptorPipeline",
    "order_entries",
    "build_url",
    "join_base_and_path",
    "resolve_request_url",
]
