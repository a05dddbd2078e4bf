"""
Pydantic models for declarative lazy pipelines.

An operation list is validated into a PipelineRequest before anything is
applied, and every run is reported back as a PipelineResult.
"""

from typing import Any, Callable, List, Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator
from enum import Enum


class OperationType(str, Enum):
    """Pipeline step enumeration"""
    MAP = "map"
    FILTER = "filter"
    FILTER_NOT = "filter_not"
    FLAT_MAP = "flat_map"
    FLATTEN = "flatten"
    TAKE = "take"
    TAKE_WHILE = "take_while"
    DROP = "drop"
    DROP_WHILE = "drop_while"
    BATCH = "batch"


FUNCTION_OPERATIONS = {
    OperationType.MAP,
    OperationType.FILTER,
    OperationType.FILTER_NOT,
    OperationType.FLAT_MAP,
    OperationType.TAKE_WHILE,
    OperationType.DROP_WHILE,
}

COUNT_OPERATIONS = {OperationType.TAKE, OperationType.DROP}


class Operation(BaseModel):
    """One step of a lazy pipeline"""
    type: OperationType = Field(..., description="Step to apply")
    function: Optional[Callable[..., Any]] = Field(
        None,
        description="Function or predicate for map/filter style steps"
    )
    count: Optional[int] = Field(
        None,
        description="Number of items for take/drop"
    )
    step: int = Field(1, description="Sampling step for take", ge=1)
    depth: Optional[int] = Field(
        None,
        description="Flatten depth, None for unlimited",
        ge=0
    )
    size: Optional[int] = Field(None, description="Batch size", gt=0)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode='after')
    def validate_arguments(self):
        """Each step type needs its own argument."""
        if self.type in FUNCTION_OPERATIONS and self.function is None:
            raise ValueError(f"{self.type.value} requires a function")
        if self.type in COUNT_OPERATIONS and self.count is None:
            raise ValueError(f"{self.type.value} requires a count")
        if self.type == OperationType.BATCH and self.size is None:
            raise ValueError("batch requires a size")
        return self


class PipelineRequest(BaseModel):
    """Validated description of a pipeline run"""
    operations: List[Operation] = Field(
        default_factory=list,
        description="Steps applied in order"
    )
    enable_caching: bool = Field(
        False,
        description="Memoise realised items on the collection"
    )
    track_memory: bool = Field(
        True,
        description="Trace peak memory while realising the pipeline"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "operations": [
                    {"type": "flatten", "depth": 1},
                    {"type": "take", "count": 3, "step": 2}
                ],
                "enable_caching": False,
                "track_memory": True
            }
        }
    )


class PerformanceInfo(BaseModel):
    """Timing and memory figures for one measured call"""
    operation: str = Field(..., description="Name of the measured operation")
    processing_time_ms: float = Field(
        ...,
        description="Wall time in milliseconds",
        ge=0
    )
    memory_usage_mb: Optional[float] = Field(
        None,
        description="Peak traced memory in megabytes",
        ge=0
    )
    input_size: Optional[int] = Field(None, description="Source length, if known", ge=0)
    output_size: Optional[int] = Field(None, description="Number of items produced", ge=0)


class PipelineResult(BaseModel):
    """Realised pipeline output"""
    result: List[Any] = Field(..., description="Items produced by the pipeline")
    operations_applied: List[str] = Field(
        default_factory=list,
        description="Step names in the order they were applied"
    )
    performance: PerformanceInfo = Field(..., description="Run measurements")
