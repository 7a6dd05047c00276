from __future__ import annotations

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


class CanonicalRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str = Field(min_length=1)
    description: str = ""
    personality: str
    prompt: str = ""
    tags: Tuple[str, ...]
    type: str = Field(default="other", examples=["anime"])
    source: str
    creator: str
    image_url: str = Field(alias="imageUrl")
    is_official: bool = Field(default=False, alias="isOfficial")
    category: str = Field(examples=["community"])
    is_favorited: bool = Field(default=False, alias="isFavorited")
    review_status: str = Field(default="pending", alias="reviewStatus")


class SkipDetail(BaseModel):
    row: int
    reason: str
    preview: str = ""


class QualitySummary(BaseModel):
    with_description: int = 0
    with_prompt: int = 0
    with_tags: int = 0
    official: int = 0


class ReportSummary(BaseModel):
    total_rows: int
    data_rows: int
    accepted: int
    skipped: int
    success_rate: float
    low_yield: bool = False


class IngestionReportModel(BaseModel):
    dialect: str
    encoding: Optional[str] = None
    delimiter: Optional[str] = Field(default=None, examples=[","])
    header: List[str] = Field(default_factory=list)
    header_synthesized: bool = False
    summary: ReportSummary
    reasons: Dict[str, int] = Field(default_factory=dict)
    skipped: List[SkipDetail] = Field(default_factory=list)
    type_distribution: Dict[str, int] = Field(default_factory=dict)
    quality: QualitySummary = Field(default_factory=QualitySummary)
    issues: List[str] = Field(default_factory=list)


class IngestResponse(BaseModel):
    records: List[CanonicalRecord]
    report: IngestionReportModel


class IngestTextRequest(BaseModel):
    text: str
    dialect: Optional[str] = Field(default=None, examples=["csv"])
    expected: Optional[int] = Field(default=None, ge=0)


class HealthResponse(BaseModel):
    ok: bool = True
