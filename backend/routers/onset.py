import traceback

from fastapi import APIRouter, HTTPException

from models import OnsetRequest, OnsetResponse
from pipeline.note_detection import (
    AnalysisConfig,
    AnalyzerInitError,
    InputDecodeError,
    NoteDetectionError,
    detect_notes_async,
)

router = APIRouter(prefix="/api")


@router.post("/onset", response_model=OnsetResponse)
async def detect_onsets(request: OnsetRequest):
    """Detect timed note events in a base64-encoded audio clip."""
    config = AnalysisConfig.from_env()
    if request.config is not None:
        config = request.config.apply(config)

    print(f"[onset] Received payload: {len(request.audio)} chars")
    try:
        notes = await detect_notes_async(request.audio, config)
    except (InputDecodeError, AnalyzerInitError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoteDetectionError as e:
        traceback.print_exc()
        raise HTTPException(status_code=500, detail=f"Onset detection failed: {e}")

    return OnsetResponse(notes=notes, count=len(notes))
