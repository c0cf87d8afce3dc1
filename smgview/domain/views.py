"""View requests: one model per mode, discriminated by ``mode``."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from smgview.config import settings


class ViewParams(BaseModel):
    """Parameters shared by every view mode."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    related_limit: int = Field(default=settings.default_related_limit, ge=1)
    depth: int = Field(default=settings.default_depth, ge=1, le=3)
    min_score_normalized: float = Field(default=0.0, ge=0.0, le=1.0)
    long_range_top_k: int = Field(default=settings.default_long_range_top_k, ge=0)
    include_long_range: bool = True


class NeighborhoodRequest(ViewParams):
    mode: Literal["neighborhood"] = "neighborhood"
    note_id: int


class ClusterMapRequest(ViewParams):
    mode: Literal["cluster_map"] = "cluster_map"
    note_id: int | None = None


class LongRangeRequest(ViewParams):
    mode: Literal["long_range"] = "long_range"
    note_id: int | None = None


class ClusterMatrixRequest(ViewParams):
    mode: Literal["cluster_matrix"] = "cluster_matrix"


ViewRequest = Annotated[
    Union[NeighborhoodRequest, ClusterMapRequest, LongRangeRequest, ClusterMatrixRequest],
    Field(discriminator="mode"),
]

VIEW_REQUEST_ADAPTER = TypeAdapter(ViewRequest)


def parse_view_request(data: dict) -> ViewRequest:
    """Validate a plain dict (camelCase or snake_case keys) into a view request."""
    return VIEW_REQUEST_ADAPTER.validate_python(data)
