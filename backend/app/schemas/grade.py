"""
Grade result schemas - the validated shape of an AI resume assessment.
"""
from typing import Literal, Tuple
from pydantic import BaseModel, Field

Priority = Literal["High", "Medium", "Low"]


class _Frozen(BaseModel):
    class Config:
        populate_by_name = True
        frozen = True


class CategoryScores(_Frozen):
    """Exactly four category scores, each 0-100"""
    ats_compatibility: int = Field(..., ge=0, le=100, strict=True, alias="atsCompatibility")
    content_quality: int = Field(..., ge=0, le=100, strict=True, alias="contentQuality")
    formatting_design: int = Field(..., ge=0, le=100, strict=True, alias="formattingDesign")
    completeness: int = Field(..., ge=0, le=100, strict=True)

    class Config:
        populate_by_name = True
        frozen = True
        extra = "forbid"


class Suggestion(_Frozen):
    priority: Priority
    area: str
    text: str


class GradeResult(_Frozen):
    """
    Complete grade for one resume.
    Suggestions keep the order the model ranked them in.
    """
    overall_score: int = Field(..., ge=0, le=100, strict=True, alias="overallScore")
    category_scores: CategoryScores = Field(..., alias="categoryScores")
    suggestions: Tuple[Suggestion, ...] = Field(...)
    enhanced_content: str = Field(..., alias="enhancedContent")

    class Config:
        populate_by_name = True
        frozen = True
        extra = "forbid"

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
