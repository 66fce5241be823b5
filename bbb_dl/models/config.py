"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .download import ConflictPolicy


class DownloadConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Download Settings
    conflict_policy: ConflictPolicy = ConflictPolicy.OVERWRITE
    max_retries: int = 10
    retry_delay: float = 5.0
    connect_timeout: float = 15.0
    read_timeout: float = 90.0

    # Output Options
    export_notes: bool = True
    project_extension: str = "mlt"

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)
    output_dir: str | None = Field(None, repr=False)

    @field_validator("conflict_policy", mode="before")
    @classmethod
    def validate_conflict_policy(cls, v) -> ConflictPolicy:
        """Accepts policy names as written in the INI file or on the command line."""
        return ConflictPolicy.parse(v)

    @field_validator("max_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        """Ensures a reasonable retry budget."""
        if v < 0 or v > 50:
            raise ValueError("Max retries must be between 0 and 50.")
        return v

    @field_validator("retry_delay", "connect_timeout", "read_timeout")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Delays and timeouts cannot be negative.")
        return v

    @field_validator("project_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Validates the project file extension."""
        v = v.lstrip(".")
        if not v or not v.isalnum():
            raise ValueError("Project extension must be a non-empty alphanumeric string.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path", "output_dir"}
        return {key for key in cls.model_fields if key not in internal_fields}
