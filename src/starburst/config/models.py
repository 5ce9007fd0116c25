import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1


class FilterModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    max_distance_km: float | None = 6.0  # None => keep the whole dataset

    @field_validator("max_distance_km")
    @classmethod
    def _positive(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("max_distance_km must be > 0")
        return v


class BuilderModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    workers: int | None = None  # None => executor default, 1 => inline scan
    chunk_size: int = 256
    progress_step_pct: int = 5

    @field_validator("workers", "chunk_size", "progress_step_pct")
    def _at_least_one(cls, v: int | None, info: ValidationInfo) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v


class OutputModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    color: str = "#a24ac3"
    markers: bool = False


# ----------------- SELECTORS ---------------------


class SelectorScanModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["scan"] = "scan"


class SelectorIncrementalModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["incremental"] = "incremental"


SelectorUnion = Annotated[
    SelectorScanModel | SelectorIncrementalModel,
    Field(discriminator="kind"),
]


# ------------------------------------------------------------------


class PlanModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "starburst"
    run_id: str = "local"
    target_guid: str
    target_links: int = Field(default=1400, gt=0)
    opposing_team: str = "E"
    input_path: str | None = None
    output_path: str | None = None
    filter: FilterModel = FilterModel()
    builder: BuilderModel = BuilderModel()
    selector: SelectorUnion = Field(default_factory=SelectorScanModel)
    log: LogModel = LogModel()
    output: OutputModel = OutputModel()

    @field_validator("input_path", "output_path")
    @classmethod
    def _expand(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return os.path.expandvars(os.path.expanduser(v))
