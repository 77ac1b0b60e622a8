"""
Resume Router - draft storage, AI grading and builder actions
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from ..config import Settings
from ..schemas.resume import (
    FetchProfileRequest, SaveDraftRequest, GradeRequest, GenerateRequest,
    ApplySuggestionsRequest, CompletionRequest,
    MessageResponse, SaveDraftResponse, ProfileResponse, HistoryResponse,
    GradeResponse, ApplySuggestionsResponse, CompletionResponse, Completion,
    ErrorResponse
)
from ..services.grading import GradingService, GradingError
from ..services.resume_store import ResumeStore
from ..services.resume_tools import completion_percentage, with_unique_skills

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resume", tags=["Resume"])


# ============================================================================
# Dependencies
# ============================================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_resume_store(request: Request) -> ResumeStore:
    return request.app.state.resume_store


def get_grading_service(request: Request) -> GradingService:
    return request.app.state.grading_service


def _student_id(student_id: Optional[str], settings: Settings) -> str:
    return student_id or settings.default_student_id


# ============================================================================
# Endpoints
# ============================================================================

@router.post(
    "/fetch-profile",
    response_model=ProfileResponse,
    responses={404: {"model": ErrorResponse}}
)
async def fetch_profile(
    payload: Optional[FetchProfileRequest] = None,
    store: ResumeStore = Depends(get_resume_store),
    settings: Settings = Depends(get_app_settings)
):
    """Fetch the latest saved resume for a student"""
    student_id = _student_id(payload.student_id if payload else None, settings)
    profile = await store.fetch(student_id)
    if profile is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": "Profile not found."}
        )
    return ProfileResponse(data=profile)


@router.post("/save-draft", response_model=SaveDraftResponse)
async def save_draft(
    payload: SaveDraftRequest,
    store: ResumeStore = Depends(get_resume_store),
    settings: Settings = Depends(get_app_settings)
):
    """Save the resume as a new draft version"""
    resume = with_unique_skills(payload.resume_data)
    version = await store.save(_student_id(payload.student_id, settings), resume)
    return SaveDraftResponse(message="Draft saved successfully!", version=version)


@router.post(
    "/grade",
    response_model=GradeResponse,
    responses={500: {"model": ErrorResponse}}
)
async def grade_resume(
    payload: GradeRequest,
    grading_service: GradingService = Depends(get_grading_service)
):
    """Grade the resume with Gemini structured output"""
    try:
        result = await grading_service.grade(payload.resume_data)
    except GradingError as e:
        logger.error(f"Grading failed ({type(e).__name__}): {e}")
        error = ErrorResponse(message=e.message, error_detail=e.detail, error_type=type(e).__name__)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error.model_dump(by_alias=True)
        )
    return GradeResponse(data=result)


@router.post("/generate", response_model=MessageResponse)
async def generate_resume(
    payload: Optional[GenerateRequest] = None,
    store: ResumeStore = Depends(get_resume_store),
    settings: Settings = Depends(get_app_settings)
):
    """Save the final resume; enhanced content comes from grading"""
    logger.info("[Backend] Generating final resume and saving enhanced content.")
    if payload and payload.resume_data is not None:
        await store.save(_student_id(payload.student_id, settings), with_unique_skills(payload.resume_data))
    return MessageResponse(message="Resume successfully generated and saved!")


@router.post("/apply-suggestions", response_model=ApplySuggestionsResponse)
async def apply_suggestions(payload: Optional[ApplySuggestionsRequest] = None):
    """Acknowledge suggestions; the resume is returned unchanged"""
    count = len(payload.suggestions) if payload else 0
    logger.info(f"[Backend] Applying {count} suggestion(s) to resume.")
    return ApplySuggestionsResponse(
        message="Suggestions applied. Please refresh.",
        updated_resume=payload.resume if payload else None
    )


@router.post("/completion", response_model=CompletionResponse)
async def resume_completion(payload: CompletionRequest):
    """Share of the required sections that are filled in"""
    return CompletionResponse(data=Completion(percentage=completion_percentage(payload.resume_data)))


@router.get("/download/{resume_id}", response_class=PlainTextResponse)
async def download_resume(resume_id: str):
    """PDF export is not available"""
    logger.info(f"[Backend] PDF download requested for ID: {resume_id}")
    return PlainTextResponse(
        "PDF Generation Not Implemented",
        status_code=status.HTTP_501_NOT_IMPLEMENTED
    )


@router.get("/history/{student_id}", response_model=HistoryResponse)
async def resume_history(
    student_id: str,
    store: ResumeStore = Depends(get_resume_store)
):
    """All saved versions for a student, newest first"""
    return HistoryResponse(data=await store.list_history(student_id))
