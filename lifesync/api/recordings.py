"""Voice recording API endpoints.

A client starts a recording, uploads base64 audio chunks as they are
captured, and stops it to get the transcript appended to whatever it has
already typed. Deleting a recording discards it without transcribing.
"""

import base64
import binascii
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from lifesync.api.deps import CurrentUser, Recordings, to_http_error
from lifesync.models.recording import (
    ChunkUpload,
    RecordingResponse,
    RecordingStart,
    RecordingStop,
    TranscriptResponse,
)
from lifesync.services.errors import LifeSyncError
from lifesync.services.recording import Recording

router = APIRouter(prefix="/api/recordings", tags=["Recordings"])


def _recording_response(recording: Recording) -> RecordingResponse:
    return RecordingResponse(
        id=recording.id,
        mime_type=recording.mime_type,
        chunk_count=len(recording.chunks),
        byte_count=recording.byte_count,
    )


@router.post("", response_model=RecordingResponse, status_code=status.HTTP_201_CREATED)
async def start_recording_endpoint(
    recordings: Recordings,
    current_user: CurrentUser,
    request: RecordingStart | None = None,
) -> RecordingResponse:
    """Acquire an audio source and start buffering."""
    mime_type = request.mime_type if request else RecordingStart().mime_type
    try:
        recording = recordings.start(mime_type)
    except LifeSyncError as e:
        raise to_http_error(e) from e
    return _recording_response(recording)


@router.post("/{recording_id}/chunks", response_model=RecordingResponse)
async def upload_chunk_endpoint(
    recordings: Recordings,
    current_user: CurrentUser,
    recording_id: UUID,
    chunk: ChunkUpload,
) -> RecordingResponse:
    """Buffer one chunk of captured audio."""
    try:
        data = base64.b64decode(chunk.data, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Chunk data must be base64",
        )

    try:
        recording = recordings.append(recording_id, data)
    except LifeSyncError as e:
        raise to_http_error(e) from e
    return _recording_response(recording)


@router.post("/{recording_id}/stop", response_model=TranscriptResponse)
async def stop_recording_endpoint(
    recordings: Recordings,
    current_user: CurrentUser,
    recording_id: UUID,
    request: RecordingStop | None = None,
) -> TranscriptResponse:
    """Release the source and transcribe the buffered audio."""
    existing_text = request.existing_text if request else ""
    try:
        transcript, text = await recordings.stop(recording_id, existing_text)
    except LifeSyncError as e:
        raise to_http_error(e) from e
    return TranscriptResponse(transcript=transcript, text=text)


@router.delete("/{recording_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_recording_endpoint(
    recordings: Recordings,
    current_user: CurrentUser,
    recording_id: UUID,
) -> None:
    """Release the source and discard the buffer. No-op if unknown."""
    recordings.cancel(recording_id)
