"""
Helpers for running and measuring lazy pipelines.

process_lazy_operations() turns a list of operation descriptions into a
LazyCollection chain, realises it and reports timing and memory.
"""

import gc
import logging
import time
import tracemalloc
from collections.abc import Sized
from typing import Any, Callable, Dict, List, Tuple, Union

from lazy import LazyCollection
from models import Operation, OperationType, PerformanceInfo, PipelineRequest, PipelineResult

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def measure_performance(operation_name: str, func: Callable, *args, **kwargs) -> Tuple[Any, PerformanceInfo]:
    """Call ``func`` and report wall time and peak traced memory.

    Errors raised by ``func`` propagate unchanged.
    """
    tracemalloc.start()
    gc.collect()
    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    info = PerformanceInfo(
        operation=operation_name,
        processing_time_ms=execution_time_ms,
        memory_usage_mb=peak / 1024 / 1024,
        output_size=len(result) if isinstance(result, Sized) else None,
    )
    logger.debug(f"{operation_name} took {execution_time_ms:.2f}ms")
    return result, info


def apply_operation(collection: LazyCollection, op: Operation) -> LazyCollection:
    """Chain a single validated step onto ``collection``."""
    if op.type == OperationType.MAP:
        return collection.map(op.function)
    elif op.type == OperationType.FILTER:
        return collection.filter(op.function)
    elif op.type == OperationType.FILTER_NOT:
        return collection.filter_not(op.function)
    elif op.type == OperationType.FLAT_MAP:
        return collection.flat_map(op.function)
    elif op.type == OperationType.FLATTEN:
        return collection.flatten(op.depth)
    elif op.type == OperationType.TAKE:
        return collection.take(op.count, op.step)
    elif op.type == OperationType.TAKE_WHILE:
        return collection.take_while(op.function)
    elif op.type == OperationType.DROP:
        return collection.skip(op.count)
    elif op.type == OperationType.DROP_WHILE:
        return collection.drop_while(op.function)
    elif op.type == OperationType.BATCH:
        return collection.batch(op.size)
    raise ValueError(f"Unknown op: {op.type}")


def process_lazy_operations(source_data, operations: List[Union[Dict[str, Any], Operation]],
                            enable_caching: bool = False, track_memory: bool = True) -> PipelineResult:
    """Validate ``operations``, apply them lazily to ``source_data`` and realise the result.

    Raises pydantic.ValidationError for a malformed description; anything
    raised while the pipeline runs propagates.
    """
    request = PipelineRequest(
        operations=operations,
        enable_caching=enable_caching,
        track_memory=track_memory,
    )

    start_time = time.perf_counter()

    lazy_col = LazyCollection(source_data, cache_enabled=request.enable_caching)
    operations_applied = []
    for op in request.operations:
        lazy_col = apply_operation(lazy_col, op)
        operations_applied.append(op.type.value)

    if request.track_memory:
        result, info = measure_performance("lazy_chain", lazy_col.to_list)
        memory_mb = info.memory_usage_mb
    else:
        result = lazy_col.to_list()
        memory_mb = None

    processing_time_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"Processed lazy chain of {len(operations_applied)} operation(s) "
        f"into {len(result)} item(s) in {processing_time_ms:.2f}ms"
    )

    return PipelineResult(
        result=result,
        operations_applied=operations_applied,
        performance=PerformanceInfo(
            operation="lazy_chain",
            processing_time_ms=processing_time_ms,
            memory_usage_mb=memory_mb,
            input_size=len(source_data) if isinstance(source_data, Sized) else None,
            output_size=len(result),
        ),
    )
