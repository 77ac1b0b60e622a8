from .grading import (
    GradingService,
    GradingError,
    ConfigurationError,
    ProviderError,
    GradingTimeoutError,
    SchemaViolationError,
    ResponseValidationError,
    GRADE_RESPONSE_SCHEMA,
    build_grading_prompt,
    build_genai_client,
    parse_grade_response
)
from .resume_store import (
    ResumeStore,
    InMemoryResumeStore,
    SqlResumeStore
)
from .resume_tools import (
    normalize_skill_name,
    with_unique_skills,
    deduplicate_skills,
    completion_percentage
)
from .demo_profile import (
    DEMO_PROFILE,
    seed_demo_profile
)

__all__ = [
    # Grading
    "GradingService",
    "GradingError",
    "ConfigurationError",
    "ProviderError",
    "GradingTimeoutError",
    "SchemaViolationError",
    "ResponseValidationError",
    "GRADE_RESPONSE_SCHEMA",
    "build_grading_prompt",
    "build_genai_client",
    "parse_grade_response",
    # Storage
    "ResumeStore",
    "InMemoryResumeStore",
    "SqlResumeStore",
    # Resume editing
    "normalize_skill_name",
    "with_unique_skills",
    "deduplicate_skills",
    "completion_percentage",
    # Seeding
    "DEMO_PROFILE",
    "seed_demo_profile"
]
