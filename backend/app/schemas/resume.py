"""
Resume document schemas and the request/response envelopes of the resume API.

Field aliases keep the camelCase names the frontend sends and expects.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, Field

from .grade import GradeResult, Suggestion


class _Wire(BaseModel):
    class Config:
        populate_by_name = True
        extra = "ignore"


# ============================================================================
# Resume Document
# ============================================================================

class PersonalInfo(_Wire):
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""


class EducationEntry(_Wire):
    college: str = ""
    degree: str = ""
    cgpa: str = ""  # grade metric as typed: CGPA, GPA or percentage
    year: str = ""
    coursework: str = ""


class SkillEntry(_Wire):
    name: str = ""
    level: str = "Intermediate"


class ExperienceEntry(_Wire):
    company: str = ""
    role: str = ""
    duration: str = ""
    description: str = ""  # newline-delimited bullets


class ProjectEntry(_Wire):
    title: str = ""
    technologies: str = ""
    description: str = ""
    github: str = ""  # repository link


class ResumeDocument(_Wire):
    """Complete resume as edited in the builder form"""
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo, alias="personalInfo")
    education: List[EducationEntry] = Field(default_factory=list)
    skills: List[SkillEntry] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    achievements: str = ""
    extracurriculars: str = ""

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# ============================================================================
# Request Schemas
# ============================================================================

class FetchProfileRequest(_Wire):
    student_id: Optional[str] = Field(None, alias="studentId")


class SaveDraftRequest(_Wire):
    student_id: Optional[str] = Field(None, alias="studentId")
    resume_data: ResumeDocument = Field(default_factory=ResumeDocument, alias="resumeData")


class GradeRequest(_Wire):
    resume_data: ResumeDocument = Field(default_factory=ResumeDocument, alias="resumeData")


class GenerateRequest(_Wire):
    student_id: Optional[str] = Field(None, alias="studentId")
    resume_data: Optional[ResumeDocument] = Field(None, alias="resumeData")


class ApplySuggestionsRequest(_Wire):
    resume: Optional[ResumeDocument] = None
    suggestions: List[Suggestion] = Field(default_factory=list)


class CompletionRequest(_Wire):
    resume_data: ResumeDocument = Field(default_factory=ResumeDocument, alias="resumeData")


# ============================================================================
# Response Schemas
# ============================================================================

class MessageResponse(_Wire):
    success: bool = True
    message: str


class SaveDraftResponse(MessageResponse):
    version: int


class ProfileResponse(_Wire):
    success: bool = True
    data: ResumeDocument


class HistoryResponse(_Wire):
    success: bool = True
    data: List[ResumeDocument] = Field(default_factory=list)


class GradeResponse(_Wire):
    success: bool = True
    data: GradeResult


class ApplySuggestionsResponse(MessageResponse):
    updated_resume: Optional[ResumeDocument] = Field(None, alias="updatedResume")


class Completion(_Wire):
    percentage: int


class CompletionResponse(_Wire):
    success: bool = True
    data: Completion


class ErrorResponse(_Wire):
    success: bool = False
    message: str
    error_detail: Optional[Any] = Field(None, alias="errorDetail")
    error_type: Optional[str] = Field(None, alias="errorType")
