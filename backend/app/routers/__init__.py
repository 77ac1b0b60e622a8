from .resume import router as resume_router

__all__ = [
    "resume_router"
]
