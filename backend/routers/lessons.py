# Daily lesson endpoints: generate with the LLM, store as story/shadowing/prompt modules.

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import LessonModule
from schemas import GeneratedLesson, LessonRequest, LessonSummary
from services.auth import require_learner
from services.content_generator import ContentGenerationError, LessonGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lessons", tags=["lessons"])

_generator: Optional[LessonGenerator] = None


def get_generator() -> LessonGenerator:
    global _generator
    if _generator is None:
        try:
            _generator = LessonGenerator()
        except ValueError as exc:
            raise HTTPException(status_code=500, detail=str(exc))
    return _generator


@router.post("/generate", response_model=GeneratedLesson)
async def generate_lesson(
    payload: LessonRequest,
    db: AsyncSession = Depends(get_db),
    learner_id: str = Depends(require_learner),
    generator: LessonGenerator = Depends(get_generator),
):
    vocab = [item.strip() for item in payload.vocab if item.strip()]
    grammar = [item.strip() for item in payload.grammar if item.strip()]
    if not vocab or not grammar or not payload.level.strip():
        raise HTTPException(status_code=400, detail="Missing required parameters")

    try:
        lesson = await asyncio.to_thread(generator.generate, vocab, grammar, payload.level.strip())
    except ContentGenerationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    story_id = uuid.uuid4()
    wire = lesson.model_dump(by_alias=True)
    db.add(
        LessonModule(
            id=story_id,
            learner_id=learner_id,
            module_type="story",
            content=wire["story"],
        )
    )
    # The story row must exist before the modules that reference it.
    await db.flush()
    db.add_all(
        [
            LessonModule(
                learner_id=learner_id,
                module_type="shadowing",
                story_id=story_id,
                content={"segments": wire["shadowingSegments"], "storyId": str(story_id)},
            ),
            LessonModule(
                learner_id=learner_id,
                module_type="prompt",
                story_id=story_id,
                content={"prompts": wire["speakingPrompts"], "storyId": str(story_id)},
            ),
        ]
    )
    await db.commit()

    logger.info("Stored lesson %s for learner %s", story_id, learner_id)
    return lesson


@router.get("", response_model=List[LessonSummary])
async def past_lessons(
    db: AsyncSession = Depends(get_db),
    learner_id: str = Depends(require_learner),
):
    stmt = (
        select(LessonModule)
        .where(LessonModule.learner_id == learner_id)
        .order_by(LessonModule.created_at.desc())
    )
    result = await db.execute(stmt)
    modules = result.scalars().all()

    segments: Dict[uuid.UUID, List[dict]] = {}
    prompts: Dict[uuid.UUID, List[dict]] = {}
    for module in modules:
        if module.module_type == "shadowing":
            segments[module.story_id] = module.content.get("segments", [])
        elif module.module_type == "prompt":
            prompts[module.story_id] = module.content.get("prompts", [])

    return [
        LessonSummary(
            storyId=str(module.id),
            created_at=module.created_at,
            story=module.content,
            shadowingSegments=segments.get(module.id, []),
            speakingPrompts=prompts.get(module.id, []),
        )
        for module in modules
        if module.module_type == "story"
    ]
