"""
Helper functions for formatting data into human-readable strings.
"""


def format_size(bytes_size: int) -> str:
    """Formats bytes into a human-readable size string (e.g., '145.3 MB')."""
    if bytes_size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while bytes_size >= 1024 and i < len(units) - 1:
        bytes_size /= 1024
        i += 1
    return f"{bytes_size:.1f} {units[i]}"


def format_duration(seconds: float) -> str:
    """
    Formats a duration in seconds into a human-readable string (e.g., '2h 34m 12s').
    """
    s = int(seconds)
    hours, remainder = divmod(s, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def format_timecode(milliseconds: int) -> str:
    """Formats milliseconds as an MLT clock value: 'HH:MM:SS.mmm'."""
    if milliseconds < 0:
        raise ValueError(f"Timecode cannot be negative: {milliseconds}")
    ms = int(round(milliseconds))
    hours, remainder = divmod(ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, millis = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def parse_timecode(timecode: str) -> int:
    """Parses an 'HH:MM:SS.mmm' clock value back into milliseconds."""
    try:
        hours, minutes, seconds = timecode.strip().split(":")
        secs, _, millis = seconds.partition(".")
        return (
            int(hours) * 3_600_000
            + int(minutes) * 60_000
            + int(secs) * 1000
            + int(millis.ljust(3, "0")[:3] or 0)
        )
    except ValueError as e:
        raise ValueError(f"Invalid timecode: '{timecode}'") from e
