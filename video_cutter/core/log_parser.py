"""
Parsers for FFmpeg diagnostic (stderr) text.

FFmpeg has no structured introspection over its log channel, so duration,
container and progress are recovered by pattern matching. Everything that
reads the log goes through these functions so they can be swapped for a
structured query later.
"""

import re
from typing import Optional


# Duration: 00:01:30.50, start: 0.000000, bitrate: 1205 kb/s
DURATION_PATTERN = re.compile(r'Duration:\s*(\d+):(\d{2}):(\d{2})\.(\d+)')

# Input #0, mov,mp4,m4a,3gp,3g2,mj2, from 'input.mp4':
INPUT_PATTERN = re.compile(r"Input #\d+,\s*(.+?),\s*from\s")

#   Stream #0:1[0x2](und): Audio: aac ...
STREAM_PATTERN = re.compile(r'^\s*Stream #(\d+):(\d+)')

# frame=  375 fps=0.0 q=-1.0 size=    1024kB time=00:00:15.00 bitrate= 559.2kbits/s speed= 320x
PROGRESS_TIME_PATTERN = re.compile(r'time=\s*(\d+):(\d{2}):(\d{2}(?:\.\d+)?)')


def parse_duration(line: str) -> Optional[float]:
    """
    Extract a ``Duration: HH:MM:SS.hh`` value in seconds.

    >>> parse_duration("  Duration: 00:01:30.50, start: 0.000000")
    90.5

    Returns:
        Seconds, or None if the line carries no duration
    """
    match = DURATION_PATTERN.search(line)
    if not match:
        return None

    hours, minutes, seconds, fraction = match.groups()
    # Fraction digits are hundredths in practice, keep whatever precision is given
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds) + float(f"0.{fraction}")


def parse_container(line: str) -> Optional[str]:
    """Extract the demuxer list from an ``Input #N, <formats>, from`` line."""
    match = INPUT_PATTERN.search(line)
    return match.group(1).strip() if match else None


def parse_stream_index(line: str) -> Optional[int]:
    """Return the stream index of a ``Stream #0:N`` line, None for other lines."""
    match = STREAM_PATTERN.match(line)
    if not match or match.group(1) != '0':
        return None
    return int(match.group(2))


def parse_progress_time(line: str) -> Optional[float]:
    """Extract the ``time=`` position of a statistics line in seconds."""
    match = PROGRESS_TIME_PATTERN.search(line)
    if not match:
        return None

    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def requested_duration(args) -> Optional[float]:
    """Value of the last ``-t`` option in an argument vector, if any."""
    duration = None
    for flag, value in zip(args, args[1:]):
        if flag == '-t':
            try:
                duration = float(value)
            except ValueError:
                duration = None
    return duration
