from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, RootModel


class RecordSet(RootModel[List[Dict[str, Optional[str]]]]):
    """Records in document order. None is a missing field and serializes as null."""

    def to_json(self, pretty: bool = False) -> str:
        return self.model_dump_json(indent=2 if pretty else None)


class NewlineCounts(BaseModel):
    crlf: int = 0
    cr: int = 0
    lf: int = 0


class ConversionReport(BaseModel):
    rows: int = 0
    columns: int = 0
    short_rows: int = Field(default=0, description="Rows padded with null")
    long_rows: int = Field(default=0, description="Rows whose extra fields were dropped")
    blank_lines: int = 0
    delimiter: str = ","
    encoding: str = Field(default="utf-8")
    newlines: NewlineCounts = Field(default_factory=NewlineCounts)


class ConvertResponse(BaseModel):
    records: List[Dict[str, Optional[str]]]
    report: ConversionReport


class HealthResponse(BaseModel):
    ok: bool = True
