# Source normalization: line endings, tabs, and outer whitespace before line scanning.

import logging

logger = logging.getLogger(__name__)

TAB_WIDTH = 4


def preprocess(source: str) -> str:
    """
    Normalize raw contract source for line-based scanning.

    - \\r\\n and lone \\r become \\n
    - every tab becomes TAB_WIDTH spaces
    - leading/trailing whitespace of the whole text is stripped

    Never fails and is idempotent: preprocess(preprocess(s)) == preprocess(s).
    """
    text = source.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\t", " " * TAB_WIDTH)
    return text.strip()


def leading_line_offset(source: str) -> int:
    """
    Return how many whole lines preprocess() drops from the front of source.

    Adding this to a 1-based line number in the normalized text gives the line
    in the original text (line endings map one-to-one, so only the stripped
    leading blank lines shift positions).
    """
    text = source.replace("\r\n", "\n").replace("\r", "\n")
    stripped = text.lstrip()
    if not stripped:
        return 0
    head = text[: len(text) - len(stripped)]
    return head.count("\n")


def split_lines(normalized: str) -> list[str]:
    """Split normalized text into trimmed lines (what the extractor and rules see)."""
    lines = [line.strip() for line in normalized.split("\n")]
    logger.debug("Split source into %d line(s)", len(lines))
    return lines
