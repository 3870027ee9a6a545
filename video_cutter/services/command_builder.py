"""
FFmpeg command builder service.

Constructs FFmpeg argument vectors for trim and probe operations. Commands
are returned as lists of workspace-relative arguments (the engine prepends
the binary) and can be rendered as strings for display and logging.
"""

import shlex
from typing import List, Sequence

from core.exceptions import ValidationError

from ..models.trim_request import TrimRequest, validate_trim_range


def format_seconds(value: float) -> str:
    """
    Render seconds for the command line.

    Microsecond precision, no trailing zeros: 10 -> "10", 15.5 -> "15.5".
    """
    text = f"{value:.6f}".rstrip('0').rstrip('.')
    return text if text not in ('', '-0') else '0'


class FFmpegCommandBuilder:
    """
    Service for building FFmpeg command line arguments.

    Stateless; every method is pure so the emitted arguments can be asserted
    on directly.
    """

    def build_trim_args(
        self,
        input_name: str,
        start: float,
        end: float,
        output_name: str
    ) -> List[str]:
        """
        Build a stream-copy trim of ``[start, end)``.

        The seek comes after ``-i`` so it is applied to the opened stream
        (accurate output-side seek) rather than as a coarse pre-input seek,
        and the length is passed as ``-t end-start`` instead of an absolute
        end time.

        Args:
            input_name: Staged input in the engine workspace
            start: Cut start in seconds
            end: Cut end in seconds
            output_name: Output artifact name in the engine workspace

        Returns:
            Argument list without the binary

        Raises:
            ValidationError: If the range is invalid
        """
        errors = validate_trim_range(start, end)
        if errors:
            raise ValidationError(errors)

        duration = end - start

        return [
            '-i', input_name,
            '-ss', format_seconds(start),
            '-t', format_seconds(duration),
            '-map', '0',            # every stream: audio, video, subtitle, data
            '-c', 'copy',           # no re-encode
            '-avoid_negative_ts', 'make_zero',
            '-y',                   # overwrite a stale output of the same name
            output_name,
        ]

    def build_trim_args_for_request(self, input_name: str, request: TrimRequest,
                                    output_name: str = None) -> List[str]:
        """Build trim arguments from a TrimRequest."""
        return self.build_trim_args(
            input_name, request.start, request.end, output_name or request.output_name
        )

    def build_probe_args(self, input_name: str) -> List[str]:
        """
        Build an inspect-only command.

        FFmpeg prints the input header (Duration, Input, Stream lines) and
        exits with "At least one output file must be specified".
        """
        return ['-hide_banner', '-i', input_name]

    def format_command_string(self, args: Sequence[str], binary: str = 'ffmpeg') -> str:
        """Format arguments as a copy-pasteable shell command."""
        return ' '.join(shlex.quote(str(arg)) for arg in [binary, *args])
