# Comment: Shadowing practice endpoints (FastAPI APIRouter).
#          Handles: upload clip -> transcribe -> score -> persist -> respond.

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import ShadowingAttempt
from schemas import (
    MAX_SENTENCE_LENGTH,
    AttemptDetail,
    AttemptResponse,
    AttemptSummary,
    ComparisonResponse,
    ScoreRequest,
)
from services.auth import get_current_learner, require_learner
from services.shadowing_engine import score
from services.transcriber import SpeechRecognizer, TranscriptionError, WhisperTranscriber

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shadowing", tags=["shadowing"])

_recognizer: Optional[SpeechRecognizer] = None


def get_recognizer() -> SpeechRecognizer:
    global _recognizer
    if _recognizer is None:
        try:
            _recognizer = WhisperTranscriber()
        except ValueError as exc:
            raise HTTPException(status_code=500, detail=str(exc))
    return _recognizer


def _to_summary(row: ShadowingAttempt) -> AttemptSummary:
    return AttemptSummary(
        attempt_id=str(row.attempt_id),
        created_at=row.created_at,
        reference_text=row.reference_text,
        transcript=row.transcript,
        similarity=row.similarity,
    )


async def _get_owned_attempt(db: AsyncSession, attempt_id: uuid.UUID, learner_id: str) -> ShadowingAttempt:
    result = await db.execute(select(ShadowingAttempt).where(ShadowingAttempt.attempt_id == attempt_id))
    attempt = result.scalar_one_or_none()

    if not attempt or attempt.learner_id != learner_id:
        raise HTTPException(status_code=404, detail="Attempt not found")
    return attempt


@router.post("/score", response_model=ComparisonResponse)
def score_transcript(payload: ScoreRequest):
    """Grade an already-transcribed attempt; nothing is stored."""
    return score(payload.reference, payload.candidate).to_response()


@router.post("/attempts", response_model=AttemptResponse)
async def create_attempt(
    reference: str = Form(..., min_length=1, max_length=MAX_SENTENCE_LENGTH),
    language: str = Form("ja"),
    audio: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    learner_id: Optional[str] = Depends(get_current_learner),
    recognizer: SpeechRecognizer = Depends(get_recognizer),
):
    audio_bytes = await audio.read()

    if not audio_bytes:
        raise HTTPException(status_code=400, detail="Empty audio upload")

    try:
        transcript = await asyncio.to_thread(
            recognizer.transcribe,
            audio_bytes,
            filename=audio.filename or "recording.webm",
            language=language,
        )
    except TranscriptionError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    result = score(reference, transcript)

    attempt_uuid = uuid.uuid4()
    attempt = ShadowingAttempt(
        attempt_id=attempt_uuid,
        learner_id=learner_id,
        reference_text=reference,
        transcript=transcript,
        similarity=result.similarity,
        differences=result.differences.to_response(),
        feedback=list(result.feedback),
    )
    db.add(attempt)
    await db.commit()

    logger.info("Stored attempt %s (similarity %d)", attempt_uuid, result.similarity)

    return AttemptResponse(
        attemptId=str(attempt_uuid),
        transcript=transcript,
        result=result.to_response(),
    )


@router.get("/attempts", response_model=List[AttemptSummary])
async def attempt_history(
    db: AsyncSession = Depends(get_db),
    learner_id: str = Depends(require_learner),
):
    stmt = (
        select(ShadowingAttempt)
        .where(ShadowingAttempt.learner_id == learner_id)
        .order_by(ShadowingAttempt.created_at.desc())
    )
    result = await db.execute(stmt)
    return [_to_summary(row) for row in result.scalars().all()]


@router.get("/attempts/{attempt_id}", response_model=AttemptDetail)
async def attempt_detail(
    attempt_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    learner_id: str = Depends(require_learner),
):
    attempt = await _get_owned_attempt(db, attempt_id, learner_id)
    summary = _to_summary(attempt)
    return AttemptDetail(
        **summary.model_dump(),
        differences=attempt.differences,
        feedback=attempt.feedback,
    )


@router.delete("/attempts/{attempt_id}", status_code=204)
async def delete_attempt(
    attempt_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    learner_id: str = Depends(require_learner),
):
    attempt = await _get_owned_attempt(db, attempt_id, learner_id)
    await db.delete(attempt)
    await db.commit()

    return Response(status_code=204)
