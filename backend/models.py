import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    func,
)

from core.db_base import Base


# SQLite's CURRENT_TIMESTAMP has one-second resolution.
def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ShadowingAttempt(Base):
    __tablename__ = "shadowing_attempts"

    attempt_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Supabase auth user id; NULL for guests
    learner_id = Column(String(64), nullable=True, index=True)
    reference_text = Column(Text, nullable=False)
    transcript = Column(Text, nullable=True)
    similarity = Column(Integer, nullable=False)
    differences = Column(JSON, nullable=False, default=dict)
    feedback = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())


class LessonModule(Base):
    __tablename__ = "lesson_modules"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    learner_id = Column(String(64), nullable=False, index=True)
    # story | shadowing | prompt
    module_type = Column(String(16), nullable=False)
    story_id = Column(Uuid(as_uuid=True), ForeignKey("lesson_modules.id"), nullable=True)
    content = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())
