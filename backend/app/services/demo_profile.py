"""
Demo profile used to pre-populate the store for the default student.
"""
import logging

from ..schemas.resume import ResumeDocument
from .resume_store import ResumeStore

logger = logging.getLogger(__name__)

DEMO_PROFILE = {
    "personalInfo": {
        "name": "Alex Johnson",
        "email": "alex.j@example.com",
        "phone": "555-500-1234",
        "linkedin": "linkedin.com/in/alexj",
        "github": "github.com/alexj-dev",
        "portfolio": "alexj.dev",
    },
    "education": [
        {
            "college": "State University",
            "degree": "M.S. Data Science",
            "cgpa": "3.9",
            "year": "2025",
            "coursework": "Machine Learning, Cloud Computing",
        }
    ],
    "skills": [{"name": "Python", "level": "Expert"}, {"name": "TensorFlow", "level": "Expert"}],
    "experience": [
        {
            "company": "Tech Innovators",
            "role": "Data Intern",
            "duration": "Summer 2024",
            "description": "Assisted in data cleansing and model training.",
        }
    ],
    "projects": [
        {
            "title": "AI Resume Grader",
            "technologies": "React, Node, Gemini API",
            "description": "Developed a full-stack tool for resume optimization.",
            "github": "github.com/project/grader",
        }
    ],
    "achievements": "Dean's List for 4 semesters",
    "extracurriculars": "Volunteer at local coding non-profit",
}


async def seed_demo_profile(store: ResumeStore, student_id: str) -> bool:
    """Save the demo profile for student_id unless something is already stored."""
    if await store.fetch(student_id) is not None:
        return False
    await store.save(student_id, ResumeDocument.model_validate(DEMO_PROFILE))
    logger.info(f"Seeded demo profile for student {student_id}")
    return True
