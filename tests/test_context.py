"""Tests for smartcheck.context: AnalysisContext, create_context, read_source."""

from pathlib import Path

import pytest

from smartcheck.context import create_context, read_source
from smartcheck.errors import SourceReadError


def test_create_context_normalizes_and_splits():
    ctx = create_context("contract A {\r\n\tuint x;\r\n}\r\n")
    assert ctx.normalized == "contract A {\n    uint x;\n}"
    assert ctx.lines == ["contract A {", "uint x;", "}"]
    assert ctx.line_offset == 0


def test_original_line_accounts_for_stripped_leading_lines():
    ctx = create_context("\n\n   \ncontract A {\n}\n")
    assert ctx.line_offset == 3
    assert ctx.lines[0] == "contract A {"
    assert ctx.original_line(0) == 4


def test_create_context_keeps_path():
    ctx = create_context("contract A {}", path=Path("A.sol"))
    assert ctx.path == Path("A.sol")


def test_read_source(tmp_path):
    f = tmp_path / "A.sol"
    f.write_bytes(b"contract A {}\n")
    assert read_source(f) == "contract A {}\n"


def test_read_source_replaces_bad_utf8(tmp_path):
    f = tmp_path / "Bad.sol"
    f.write_bytes(b"contract A { // \xff }\n")
    assert "contract A" in read_source(f)


def test_read_source_nonexistent():
    with pytest.raises(SourceReadError):
        read_source(Path("/nonexistent/A.sol"))


def test_read_source_strips_byte_order_mark(tmp_path):
    f = tmp_path / "Bom.sol"
    f.write_bytes(b"\xef\xbb\xbfcontract A {\n}\n")
    source = read_source(f)
    assert source.startswith("contract A {")
    assert create_context(source).lines[0] == "contract A {"
