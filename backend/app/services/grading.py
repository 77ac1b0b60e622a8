"""
Resume Grading Service using Gemini structured output.

Sends a resume document to Gemini with a fixed prompt and a fixed response
schema, then parses and validates the JSON reply into a GradeResult.
"""
import asyncio
import json
import logging
import re
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from ..config import Settings
from ..schemas.grade import GradeResult
from ..schemas.resume import ResumeDocument

logger = logging.getLogger(__name__)


# ============================================================================
# Errors
# ============================================================================

class GradingError(Exception):
    """Base class for a failed grading request."""
    message = "AI Grading failed."

    def __init__(self, detail: Any = None, message: Optional[str] = None):
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(self.message if detail is None else f"{self.message} {detail}")


class ConfigurationError(GradingError):
    message = "Gemini AI Client is not initialized. API Key is missing."


class ProviderError(GradingError):
    message = "AI Grading failed. Please check your API key, network, and quota."


class GradingTimeoutError(GradingError):
    message = "AI Grading timed out waiting for the provider."


class SchemaViolationError(GradingError):
    message = "AI Grading returned a response that is not valid JSON."


class ResponseValidationError(GradingError):
    message = "AI Grading returned JSON that does not match the grade format."


# ============================================================================
# Request Contract
# ============================================================================

GRADING_PROMPT_TEMPLATE = """You are a world-class ATS (Applicant Tracking System) and Career Advisor. Analyze the following resume data provided as a JSON object. Your goal is to provide a structured grade and specific, actionable suggestions for improvement. The entire response MUST be a single JSON object that strictly adheres to the provided JSON schema.

Focus grading on:
1. **ATS Compatibility:** Are there enough relevant keywords? Is the formatting easy for a machine to parse?
2. **Content Quality:** Are strong action verbs used? Are achievements quantified (e.g., 'Increased sales by 20%')?
3. **Formatting & Design:** Is the information clear, logically grouped, and well-spaced?
4. **Completeness:** Are all critical sections (contact, education, skills, experience) present and detailed?

Every score is an integer from 0 to 100.

Resume Data:
{resume_json}
"""


def _score(description: str) -> dict:
    return {"type": "INTEGER", "minimum": 0, "maximum": 100, "description": description}


GRADE_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "overallScore": _score("Overall score out of 100 based on the average of category scores."),
        "categoryScores": {
            "type": "OBJECT",
            "properties": {
                "atsCompatibility": _score("Score out of 100 for ATS parsing and keyword usage."),
                "contentQuality": _score("Score out of 100 for strong action verbs and quantified results."),
                "formattingDesign": _score("Score out of 100 for structure, clarity, and readability."),
                "completeness": _score("Score out of 100 for having all necessary sections and contact info."),
            },
            "required": ["atsCompatibility", "contentQuality", "formattingDesign", "completeness"],
        },
        "suggestions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "priority": {"type": "STRING", "enum": ["High", "Medium", "Low"]},
                    "area": {"type": "STRING", "description": "E.g., Content Quality, ATS Keywords, Grammar/Spelling"},
                    "text": {"type": "STRING", "description": "Specific, actionable suggestion for improvement. Be concise."},
                },
                "required": ["priority", "area", "text"],
            },
        },
        "enhancedContent": {
            "type": "STRING",
            "description": "A rewritten, professional 2-3 sentence summary based on the resume data.",
        },
    },
    "required": ["overallScore", "categoryScores", "suggestions", "enhancedContent"],
}


def build_grading_prompt(resume: ResumeDocument) -> str:
    """Embed the serialized resume in the fixed grading instructions."""
    resume_json = json.dumps(resume.to_wire(), indent=2, ensure_ascii=False)
    return GRADING_PROMPT_TEMPLATE.format(resume_json=resume_json)


_OPENING_FENCE = re.compile(r"^```(?:json)?[ \t]*", re.IGNORECASE)


def _strip_code_fences(text: str) -> str:
    # Clean up response if it has markdown code blocks
    text = _OPENING_FENCE.sub("", text.strip(), count=1)
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_grade_response(response_text: Optional[str]) -> GradeResult:
    """
    Parse the raw model output into a GradeResult.

    Raises:
        SchemaViolationError: text is empty, not JSON, or not a JSON object
        ResponseValidationError: JSON object with missing or out-of-range fields
    """
    if not response_text or not response_text.strip():
        raise SchemaViolationError("Empty response from model")

    cleaned = _strip_code_fences(response_text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Grade response is not JSON: {e}; raw: {cleaned[:500]}")
        raise SchemaViolationError(str(e)) from e

    if not isinstance(payload, dict):
        raise SchemaViolationError(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        return GradeResult.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Grade response failed validation: {e.error_count()} error(s)")
        detail = [
            {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise ResponseValidationError(detail) from e


# ============================================================================
# Client + Service
# ============================================================================

def build_genai_client(settings: Settings) -> Optional[genai.Client]:
    """Create the Gemini client, or None when no API key is configured."""
    if not settings.has_gemini_credential():
        logger.critical("GEMINI_API_KEY is missing. AI grading will fail.")
        return None
    return genai.Client(
        api_key=settings.gemini_api_key.strip(),
        http_options=types.HttpOptions(timeout=int(settings.grading_timeout_seconds * 1000)),
    )


class GradingService:
    """
    Grades resumes with a single Gemini call per request.

    Holds no per-request state; the client is injected so tests can
    substitute a fake. A client of None means the credential is absent.
    """

    def __init__(
        self,
        client: Optional[Any],
        model: str = "gemini-2.5-flash",
        temperature: float = 0.2,
        timeout_seconds: float = 30.0,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[Any] = None) -> "GradingService":
        if client is None:
            client = build_genai_client(settings)
        return cls(
            client,
            model=settings.gemini_model,
            temperature=settings.grading_temperature,
            timeout_seconds=settings.grading_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def _generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=GRADE_RESPONSE_SCHEMA,
            temperature=self.temperature,
        )

    async def grade(self, resume: ResumeDocument) -> GradeResult:
        """
        Grade a resume document.

        Raises:
            ConfigurationError: no Gemini client; nothing is sent
            GradingTimeoutError: provider did not answer within timeout_seconds
            ProviderError: network, auth, quota or other API failure
            SchemaViolationError: reply is not a JSON object
            ResponseValidationError: reply JSON does not match GradeResult
        """
        if self.client is None:
            raise ConfigurationError()

        logger.info(f"[AI] Requesting grade for: {resume.personal_info.name or 'Anonymous'}")
        prompt = build_grading_prompt(resume)

        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=self._generation_config(),
                ),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.error(f"Gemini grading timed out after {self.timeout_seconds}s")
            raise GradingTimeoutError(f"No response after {self.timeout_seconds} seconds") from e
        except (genai_errors.APIError, httpx.HTTPError) as e:
            logger.error(f"Gemini API Error during grading: {e}")
            raise ProviderError(str(e)) from e
        except Exception as e:
            logger.error(f"Unexpected error during grading call: {type(e).__name__}: {e}")
            raise ProviderError(str(e)) from e

        result = parse_grade_response(response.text)
        logger.info(f"[AI] Grade completed: overall {result.overall_score}")
        return result
