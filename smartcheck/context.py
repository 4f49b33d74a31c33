# Per-analysis context: raw source, normalized text, trimmed lines and the line offset
# needed to report positions in the original text. Also reads contract files from disk.

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from smartcheck.errors import SourceReadError
from smartcheck.preprocess import leading_line_offset, preprocess, split_lines

logger = logging.getLogger(__name__)


@dataclass
class AnalysisContext:
    """
    Per-source state for one analysis run.

    Rules and the extractor work on `lines` (0-based indices). Use
    original_line(index) to turn an index into the 1-based line number of the
    original, un-normalized text.
    """

    source: str
    normalized: str
    lines: list[str] = field(default_factory=list)
    line_offset: int = 0
    path: Optional[Path] = None

    def original_line(self, index: int) -> int:
        """1-based line in the original source for a 0-based normalized index."""
        return index + 1 + self.line_offset


def create_context(source: str, path: Optional[Path] = None) -> AnalysisContext:
    """Normalize source and build an AnalysisContext for it."""
    normalized = preprocess(source)
    ctx = AnalysisContext(
        source=source,
        normalized=normalized,
        lines=split_lines(normalized),
        line_offset=leading_line_offset(source),
        path=path,
    )
    logger.debug(
        "Context ready%s: %d line(s), offset %d",
        f" for {path}" if path else "",
        len(ctx.lines),
        ctx.line_offset,
    )
    return ctx


def read_source(path: Path) -> str:
    """
    Read a contract file as text.

    Decodes with errors="replace" so bad UTF-8 does not crash.

    Raises:
        SourceReadError: if the file cannot be read.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        raise SourceReadError(f"Failed to read {path}: {e}") from e
    return data.decode("utf-8-sig", errors="replace")
