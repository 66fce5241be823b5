"""
Pydantic models for the normalized recording metadata.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SlideRecord(BaseModel):
    """One slide image and the interval during which it was shown."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    image_file: str
    interval_start_ms: int = Field(ge=0)
    interval_end_ms: int
    width: float = Field(gt=0)
    height: float = Field(gt=0)

    @model_validator(mode="after")
    def validate_interval(self) -> "SlideRecord":
        if self.interval_end_ms <= self.interval_start_ms:
            raise ValueError(
                f"Slide '{self.id}' ends ({self.interval_end_ms}ms) before it "
                f"starts ({self.interval_start_ms}ms)."
            )
        return self

    @property
    def duration_ms(self) -> int:
        return self.interval_end_ms - self.interval_start_ms


class SlideOverlay(BaseModel):
    """Everything extracted from the slide overlay document (shapes.svg)."""

    model_config = ConfigDict(frozen=True)

    slides: list[SlideRecord] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    text_urls: list[str] = Field(default_factory=list)


class RecordingMetadata(BaseModel):
    """Session-level metadata parsed from metadata.xml."""

    model_config = ConfigDict(frozen=True)

    duration_ms: int = Field(gt=0)
    meeting_name: str = Field(min_length=1)
    meeting_id: str
    start_time_ms: int | None = None
    end_time_ms: int | None = None
