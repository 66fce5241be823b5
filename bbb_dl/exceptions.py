"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class BbbDlError(Exception):
    """Base exception for all application-specific errors."""


class InvalidPlaybackUrlError(BbbDlError):
    """Raised when the input URL is not a supported playback URL."""


class TransportError(BbbDlError):
    """Raised when a single file could not be fetched after all retries."""

    def __init__(self, url: str, cause: BaseException | str):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to download '{url}': {cause}")


class MetadataParseError(BbbDlError):
    """Raised when a fetched XML document cannot be parsed."""


class MissingRequiredAssetError(BbbDlError):
    """
    Raised when an asset or field the timeline depends on is missing, such as
    the playback duration or the webcam stream.
    """

    def __init__(self, asset: str, detail: str = ""):
        self.asset = asset
        message = f"Required asset missing: {asset}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class OutputWriteError(BbbDlError):
    """Raised when the project file or output directory cannot be written."""


class ConfigurationError(BbbDlError):
    """Raised for issues related to configuration loading or validation."""
