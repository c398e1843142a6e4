"""Audio recording session schemas."""

from uuid import UUID

from sqlmodel import Field, SQLModel


class RecordingStart(SQLModel):
    """Schema for starting a recording."""

    mime_type: str = Field(default="audio/webm", max_length=100)


class ChunkUpload(SQLModel):
    """A base64-encoded chunk of captured audio."""

    data: str


class RecordingStop(SQLModel):
    """Schema for stopping a recording.

    ``existing_text`` is whatever the user already typed; the transcript is
    appended to it.
    """

    existing_text: str = Field(default="", max_length=4000)


class RecordingResponse(SQLModel):
    """State of an active recording."""

    id: UUID
    mime_type: str
    chunk_count: int
    byte_count: int


class TranscriptResponse(SQLModel):
    """Transcription result composed with the existing text."""

    transcript: str
    text: str
