"""Source view rendering.

Functions:
    render_lines(lines, segments)    -> list[RenderLine]
    render_file(path, segments)      -> list[RenderLine]   raises RenderUnavailable

The result is structured per-line data; markup is left to the templates.
"""

from collections.abc import Sequence
from pathlib import Path

from codebrowser.models import RenderLine, Segment


class RenderUnavailable(Exception):
    """Raised when a source file cannot be read."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(f"Cannot render '{file_path}': {reason}")
        self.file_path = file_path
        self.reason = reason


def read_source(file_path: str | Path) -> list[str]:
    try:
        text = Path(file_path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise RenderUnavailable(str(file_path), exc.strerror or str(exc)) from exc
    return text.splitlines()


def render_lines(lines: Sequence[str], segments: Sequence[Segment]) -> list[RenderLine]:
    """Annotate every source line with the Segment covering it, if any.

    *segments* must be ordered by line (as ``merge()`` returns them). Both
    sequences are walked once; Segment parts past the last line are ignored.
    """
    rendered: list[RenderLine] = []
    cursor = 0
    for number, text in enumerate(lines, start=1):
        while cursor < len(segments) and segments[cursor].line_end < number:
            cursor += 1
        if cursor < len(segments) and segments[cursor].line_start <= number:
            segment = segments[cursor]
            rendered.append(RenderLine(number, text, segment.highlight_class, segment.tooltip))
        else:
            rendered.append(RenderLine(number, text))
    return rendered


def render_file(file_path: str | Path, segments: Sequence[Segment]) -> list[RenderLine]:
    return render_lines(read_source(file_path), segments)
