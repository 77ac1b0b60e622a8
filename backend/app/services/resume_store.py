"""
Resume Document Store - saved drafts keyed by student.

Every save appends a new version; fetch returns the latest one and
list_history returns all of them, newest first.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..models import ResumeDraft
from ..schemas.resume import ResumeDocument

logger = logging.getLogger(__name__)


class ResumeStore(ABC):

    @abstractmethod
    async def fetch(self, student_id: str) -> Optional[ResumeDocument]:
        """Latest saved document for the student, or None if nothing was saved."""

    @abstractmethod
    async def save(self, student_id: str, resume: ResumeDocument) -> int:
        """Store a new version and return its number (1-based per student)."""

    @abstractmethod
    async def list_history(self, student_id: str) -> List[ResumeDocument]:
        """All saved versions for the student, newest first."""


class InMemoryResumeStore(ResumeStore):
    """Process-lifetime store. Documents are copied on the way in and out."""

    def __init__(self):
        self._versions: Dict[str, List[ResumeDocument]] = {}
        self._lock = asyncio.Lock()

    async def fetch(self, student_id: str) -> Optional[ResumeDocument]:
        versions = self._versions.get(student_id)
        if not versions:
            return None
        return versions[-1].model_copy(deep=True)

    async def save(self, student_id: str, resume: ResumeDocument) -> int:
        async with self._lock:
            versions = self._versions.setdefault(student_id, [])
            versions.append(resume.model_copy(deep=True))
            version = len(versions)
        logger.info(f"[Database] Draft v{version} saved for: {resume.personal_info.name or 'Anonymous'}")
        return version

    async def list_history(self, student_id: str) -> List[ResumeDocument]:
        versions = self._versions.get(student_id, [])
        return [doc.model_copy(deep=True) for doc in reversed(versions)]


class SqlResumeStore(ResumeStore):
    """Store backed by the resume_drafts table."""

    # Attempts when another process takes the same version number first
    SAVE_ATTEMPTS = 3

    def __init__(self, session_maker: async_sessionmaker):
        self.session_maker = session_maker
        self._save_lock = asyncio.Lock()

    async def fetch(self, student_id: str) -> Optional[ResumeDocument]:
        async with self.session_maker() as db:
            result = await db.execute(
                select(ResumeDraft)
                .where(ResumeDraft.student_id == student_id)
                .order_by(ResumeDraft.version.desc())
                .limit(1)
            )
            draft = result.scalar_one_or_none()
        if draft is None:
            return None
        return ResumeDocument.model_validate(draft.data)

    async def save(self, student_id: str, resume: ResumeDocument) -> int:
        async with self._save_lock:
            for attempt in range(1, self.SAVE_ATTEMPTS + 1):
                try:
                    version = await self._insert_next_version(student_id, resume)
                    break
                except IntegrityError:
                    if attempt == self.SAVE_ATTEMPTS:
                        raise
                    logger.warning(f"Version conflict saving draft for {student_id}, retry {attempt}")
        logger.info(f"[Database] Draft v{version} saved for: {resume.personal_info.name or 'Anonymous'}")
        return version

    async def _insert_next_version(self, student_id: str, resume: ResumeDocument) -> int:
        async with self.session_maker() as db:
            try:
                result = await db.execute(
                    select(func.max(ResumeDraft.version)).where(ResumeDraft.student_id == student_id)
                )
                version = (result.scalar() or 0) + 1
                db.add(ResumeDraft(student_id=student_id, version=version, data=resume.to_wire()))
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return version

    async def list_history(self, student_id: str) -> List[ResumeDocument]:
        async with self.session_maker() as db:
            result = await db.execute(
                select(ResumeDraft)
                .where(ResumeDraft.student_id == student_id)
                .order_by(ResumeDraft.version.desc())
            )
            drafts = result.scalars().all()
        return [ResumeDocument.model_validate(draft.data) for draft in drafts]
