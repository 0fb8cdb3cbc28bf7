from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Tile(BaseModel):
    model_config = ConfigDict(frozen=True)

    columns: Dict[str, str] = Field(default_factory=dict)
    url: str = ""
    reference_url: str = ""
    icon: str = ""

    def get(self, column: str, default: str) -> str:
        """Return the trimmed value of ``column``, or ``default`` when absent."""
        value = self.columns.get(column)
        if value is None:
            return default
        return value


class Group(BaseModel):
    tag: str
    members: List[Tile] = Field(default_factory=list)


class LoadResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_name: str = ""
    encoding: Optional[str] = Field(default=None, examples=["utf-8"])
    delimiter: str = ","
    header: List[str] = Field(default_factory=list)
    sample_lines: List[str] = Field(default_factory=list)
    rows_parsed: int = 0
    rows_discarded: int = 0
    rows: List[Tile] = Field(default_factory=list)
    fallback: bool = False


class LoadSummary(BaseModel):
    source_name: str
    delimiter: str
    header: List[str]
    rows_parsed: int
    rows_discarded: int
    total_tiles: int
    fallback: bool


class DashboardResponse(BaseModel):
    groups: List[Group]
    load: LoadSummary


class HealthResponse(BaseModel):
    ok: bool = True
