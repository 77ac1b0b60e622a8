from .resume_draft import ResumeDraft

__all__ = [
    "ResumeDraft",
]
