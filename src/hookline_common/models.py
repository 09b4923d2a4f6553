from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, Field


class PipelineSource(BaseModel):
    type: Literal["ndjson"] = "ndjson"
    options: Dict[str, Any] = Field(default_factory=dict)


class PipelineDestination(BaseModel):
    type: Literal["ndjson"] = "ndjson"
    options: Dict[str, Any] = Field(default_factory=dict)


class PipelineSpec(BaseModel):
    name: str = "hookline"
    source: PipelineSource = Field(default_factory=PipelineSource)
    filter: Dict[str, Any]
    destination: PipelineDestination = Field(default_factory=PipelineDestination)
    batch_max_events: int = Field(200, ge=1)
