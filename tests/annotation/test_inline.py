"""Tests for per-line /** @tag */ annotations."""

from pathlib import Path

import pytest

from docplane.annotation.inline import extract_inline_annotations, read_source_lines
from docplane.annotation.models import InlineAnnotation, SymbolDescriptor

SOURCE = (
    "class FooTest:",
    "    def test_bar(self):",
    "        a = 1  /** @codeCoverageIgnore */",
    "        b = 2  /* @Todo fix later */",
    "        c = a + b  # @todo not a block comment */",
    "        d = 3  /** @todo final */",
    "        return d",
    "x = 1  /** @outside */",
)


def _symbol(
    start_line: int,
    end_line: int,
    source_lines: tuple[str, ...] | None = None,
    file_path: str = "",
) -> SymbolDescriptor:
    return SymbolDescriptor(
        doc_comment="",
        file_path=file_path,
        start_line=start_line,
        end_line=end_line,
        declaring_type_name="FooTest",
        member_name="test_bar",
        source_lines=source_lines,
    )


class TestExtractInlineAnnotations:
    def test_given_range_when_scanned_then_last_occurrence_wins(self) -> None:
        """Names are lowercased and the last line with a name wins."""
        # Given
        symbol = _symbol(2, 7, source_lines=SOURCE)

        # When
        annotations = extract_inline_annotations(symbol)

        # Then
        assert annotations == {
            "codecoverageignore": InlineAnnotation(line=3, value=""),
            "todo": InlineAnnotation(line=6, value="final"),
        }

    def test_given_range_when_scanned_then_lines_outside_ignored(self) -> None:
        # When
        annotations = extract_inline_annotations(_symbol(1, 2, source_lines=SOURCE))

        # Then
        assert annotations == {}

    def test_given_explicit_lines_when_scanned_then_descriptor_lines_unused(self) -> None:
        # When
        annotations = extract_inline_annotations(_symbol(8, 8), source_lines=SOURCE)

        # Then
        assert annotations == {"outside": InlineAnnotation(line=8, value="")}

    def test_given_range_past_end_of_file_when_scanned_then_clamped(self) -> None:
        # When
        annotations = extract_inline_annotations(_symbol(4, 40, source_lines=SOURCE))

        # Then
        assert set(annotations) == {"todo", "outside"}
        assert annotations["todo"].line == 6

    def test_given_file_path_when_scanned_then_file_read(self, tmp_path: Path) -> None:
        # Given
        path = tmp_path / "test_foo.py"
        path.write_text("\n".join(SOURCE) + "\n", encoding="utf-8")
        symbol = _symbol(3, 4, file_path=str(path))

        # When
        annotations = extract_inline_annotations(symbol)

        # Then
        assert annotations == {
            "codecoverageignore": InlineAnnotation(line=3, value=""),
            "todo": InlineAnnotation(line=4, value="fix later"),
        }
        assert list(read_source_lines(symbol)) == list(SOURCE)

    @pytest.mark.parametrize("separator", ["\f", "\v", "\x1c", "\x85", "\u2028"])
    def test_given_non_newline_break_character_when_file_read_then_line_numbers_kept(
        self, tmp_path: Path, separator: str
    ) -> None:
        """Only newlines end a line."""
        # Given
        path = tmp_path / "test_foo.py"
        path.write_text(
            f"x = '{separator}'\nclass A:\n    y = 1  /** @tag v */\n", encoding="utf-8"
        )

        # When
        annotations = extract_inline_annotations(_symbol(2, 3, file_path=str(path)))

        # Then
        assert annotations == {"tag": InlineAnnotation(line=3, value="v")}

    def test_given_crlf_file_when_read_then_lines_split(self, tmp_path: Path) -> None:
        # Given
        path = tmp_path / "test_foo.py"
        path.write_bytes(b"a = 1\r\nb = 2  /** @tag crlf */\r\n")

        # When
        annotations = extract_inline_annotations(_symbol(2, 2, file_path=str(path)))

        # Then
        assert annotations == {"tag": InlineAnnotation(line=2, value="crlf")}

    def test_given_non_utf8_file_when_read_then_decode_error(self, tmp_path: Path) -> None:
        # Given
        path = tmp_path / "test_foo.py"
        path.write_bytes(b"\xff\xfe\x00bad")

        # When / Then
        with pytest.raises(UnicodeDecodeError):
            extract_inline_annotations(_symbol(1, 1, file_path=str(path)))

    def test_given_annotation_when_to_dict_then_line_and_value(self) -> None:
        # Then
        assert InlineAnnotation(line=4, value="fix later").to_dict() == {
            "line": 4,
            "value": "fix later",
        }
