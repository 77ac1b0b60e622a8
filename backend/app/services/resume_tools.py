"""
Helpers for editing resume documents: skill de-duplication and completion.
"""
from typing import List

from ..schemas.resume import ResumeDocument, SkillEntry


# Common aliases mapping
SKILL_ALIASES = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "cpp": "c++",
    "c#": "csharp",
    "node": "nodejs",
    "node.js": "nodejs",
    "react.js": "react",
    "reactjs": "react",
    "vue.js": "vue",
    "mongo": "mongodb",
    "postgres": "postgresql",
    "k8s": "kubernetes",
    "gcp": "google cloud",
    "ml": "machine learning",
    "dl": "deep learning",
}

PROFICIENCY_ORDER = {"expert": 4, "advanced": 3, "intermediate": 2, "beginner": 1}


def normalize_skill_name(skill_name: str) -> str:
    """Normalize skill name for duplicate detection."""
    normalized = skill_name.lower().strip()
    return SKILL_ALIASES.get(normalized, normalized)


def deduplicate_skills(skills: List[SkillEntry]) -> List[SkillEntry]:
    """Remove duplicate skills in entry order, keeping the highest proficiency seen."""
    skill_map = {}
    for skill in skills:
        normalized = normalize_skill_name(skill.name)
        current = skill_map.get(normalized)

        if current is None:
            skill_map[normalized] = skill
        elif PROFICIENCY_ORDER.get(skill.level.lower(), 0) > PROFICIENCY_ORDER.get(current.level.lower(), 0):
            # Keep the first spelling, upgrade the level
            skill_map[normalized] = current.model_copy(update={"level": skill.level})

    return list(skill_map.values())


def with_unique_skills(resume: ResumeDocument) -> ResumeDocument:
    """Copy of the resume whose skill list has one entry per skill name."""
    updated = resume.model_copy(deep=True)
    updated.skills = deduplicate_skills(updated.skills)
    return updated


def completion_percentage(resume: ResumeDocument) -> int:
    required = [
        bool(resume.personal_info.name.strip()),
        bool(resume.personal_info.email.strip()),
        len(resume.education) > 0,
        len(resume.skills) > 0,
    ]
    return round(sum(required) / len(required) * 100)
