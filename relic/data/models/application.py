"""Monitored application model."""

from pydantic import BaseModel, ConfigDict, Field


class Application(BaseModel):
    """Application in an account with its current throughput."""

    id: int
    name: str = Field(..., min_length=1)
    throughput: float = Field(0.0, ge=0)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)
