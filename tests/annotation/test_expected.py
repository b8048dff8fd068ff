"""Tests for legacy @expectedException extraction."""

from typing import Any

import pytest

from docplane.annotation.expected import extract_expected_exception
from docplane.annotation.models import ExpectedException, SymbolDescriptor
from docplane.annotation.resolution import PythonConstantResolver


class DictConstants:
    def __init__(self, values: dict[str, Any]) -> None:
        self.values = values

    def try_resolve_constant(self, text: str) -> Any | None:
        return self.values.get(text)


def _symbol(*lines: str) -> SymbolDescriptor:
    body = "".join(f" * {line}\n" for line in lines)
    return SymbolDescriptor(
        doc_comment=f"/**\n{body} */",
        file_path="",
        start_line=10,
        end_line=12,
        declaring_type_name="tests.FooTest",
        member_name="test_bar",
    )


class TestInlineForm:
    """Single-line @expectedException Type [message] [code]."""

    def test_given_quoted_message_and_code_when_extracted_then_override_tags(self) -> None:
        """Inline message and code win over the separate tags."""
        # Given
        symbol = _symbol(
            '@expectedException FooException "bad thing" 42',
            "@expectedExceptionMessage ignored message",
            "@expectedExceptionCode 7",
        )

        # When
        expected = extract_expected_exception(symbol)

        # Then
        assert expected == ExpectedException(
            type_name="FooException", code=42, message="bad thing", message_pattern=""
        )

    def test_given_bare_word_message_when_extracted_then_message(self) -> None:
        # When
        expected = extract_expected_exception(_symbol(r"@expectedException My\Error oops 3"))

        # Then
        assert expected is not None
        assert expected.type_name == r"My\Error"
        assert expected.message == "oops"
        assert expected.code == 3

    def test_given_inline_message_only_when_extracted_then_code_from_tag(self) -> None:
        """Fields fall back one by one."""
        # Given
        symbol = _symbol(
            "@expectedException FooException oops",
            "@expectedExceptionMessage ignored",
            "@expectedExceptionCode 5",
        )

        # When
        expected = extract_expected_exception(symbol)

        # Then
        assert expected is not None
        assert expected.message == "oops"
        assert expected.code == 5


class TestSeparateTags:
    """Fallback to @expectedExceptionMessage / RegExp / Code."""

    def test_given_only_type_when_extracted_then_tags_used(self) -> None:
        # Given
        symbol = _symbol(
            "@expectedException FooException",
            "@expectedExceptionMessage Something failed",
            "@expectedExceptionMessageRegExp /^Some.*failed$/",
            "@expectedExceptionCode 12",
        )

        # When
        expected = extract_expected_exception(symbol)

        # Then
        assert expected == ExpectedException(
            type_name="FooException",
            code=12,
            message="Something failed",
            message_pattern="/^Some.*failed$/",
        )

    def test_given_no_optional_tags_when_extracted_then_defaults(self) -> None:
        # When
        expected = extract_expected_exception(_symbol("@expectedException FooException"))

        # Then
        assert expected == ExpectedException(type_name="FooException")

    def test_given_no_legacy_tag_when_extracted_then_none(self) -> None:
        """The separate tags alone do not declare an expectation."""
        # Given
        symbol = _symbol("@expectedExceptionMessage orphan", "@expectedExceptionCode 1")

        # When / Then
        assert extract_expected_exception(symbol) is None

    @pytest.mark.parametrize(("raw", "code"), [("42", 42), ("-3", -3), ("3.0", 3), ("1e2", 100)])
    def test_given_numeric_code_when_extracted_then_int(self, raw: str, code: int) -> None:
        # Given
        symbol = _symbol("@expectedException FooException", f"@expectedExceptionCode {raw}")

        # When
        expected = extract_expected_exception(symbol)

        # Then
        assert expected is not None
        assert expected.code == code


class TestTraitTags:
    """Type-level symbols also see the tags of their composed traits."""

    def _type_symbol(self, own: str, *traits: str) -> SymbolDescriptor:
        return SymbolDescriptor(
            doc_comment=own,
            file_path="",
            start_line=5,
            end_line=30,
            declaring_type_name="tests.FooTest",
            composed_trait_doc_comments=traits,
            is_type_level=True,
        )

    def test_given_own_and_trait_tags_when_extracted_then_own_tags_win(self) -> None:
        # Given
        symbol = self._type_symbol(
            "/**\n * @expectedException FooException\n"
            " * @expectedExceptionMessage own\n"
            " * @expectedExceptionMessageRegExp /own/\n"
            " * @expectedExceptionCode 1\n */",
            "/**\n * @expectedExceptionMessage trait\n"
            " * @expectedExceptionMessageRegExp /trait/\n"
            " * @expectedExceptionCode 2\n */",
        )

        # When
        expected = extract_expected_exception(symbol)

        # Then
        assert expected == ExpectedException(
            type_name="FooException", code=1, message="own", message_pattern="/own/"
        )

    def test_given_tag_only_on_trait_when_extracted_then_trait_value_used(self) -> None:
        # Given
        symbol = self._type_symbol(
            "/**\n * @expectedException FooException\n * @expectedExceptionCode 1\n */",
            "/**\n * @expectedExceptionMessage first\n */",
            "/**\n * @expectedExceptionMessage second\n * @expectedExceptionCode 2\n */",
        )

        # When
        expected = extract_expected_exception(symbol)

        # Then
        assert expected is not None
        assert expected.message == "first"
        assert expected.code == 1


class TestConstantCodes:
    """Codes and messages naming a constant."""

    def test_given_constant_code_tag_when_resolvable_then_value(self) -> None:
        # Given
        symbol = _symbol(
            "@expectedException FooException",
            "@expectedExceptionCode ErrorCodes::NOT_FOUND",
            "@expectedExceptionMessage ErrorCodes::LABEL",
        )
        constants = DictConstants({"ErrorCodes::NOT_FOUND": 404, "ErrorCodes::LABEL": "missing"})

        # When
        expected = extract_expected_exception(symbol, constants)

        # Then
        assert expected is not None
        assert expected.code == 404
        assert expected.message == "missing"

    def test_given_inline_constant_code_when_resolvable_then_value(self) -> None:
        # Given
        symbol = _symbol("@expectedException FooException oops ErrorCodes::NOT_FOUND")

        # When
        expected = extract_expected_exception(symbol, DictConstants({"ErrorCodes::NOT_FOUND": 404}))

        # Then
        assert expected is not None
        assert expected.code == 404

    def test_given_undefined_constant_when_extracted_then_passed_through(self) -> None:
        # Given
        symbol = _symbol(
            "@expectedException FooException", "@expectedExceptionCode Missing::CODE"
        )

        # When
        expected = extract_expected_exception(symbol, DictConstants({}))

        # Then
        assert expected is not None
        assert expected.code == "Missing::CODE"

    def test_given_python_resolver_when_extracted_then_class_attribute(self) -> None:
        """The default resolver reads class attributes of importable types."""
        # Given
        symbol = _symbol(
            "@expectedException FooException",
            "@expectedExceptionCode tests.annotation.providers.ErrorCodes::NOT_FOUND",
        )

        # When
        expected = extract_expected_exception(symbol, PythonConstantResolver())

        # Then
        assert expected is not None
        assert expected.code == 404

    def test_given_extracted_when_to_dict_then_plain_mapping(self) -> None:
        # Given
        symbol = _symbol('@expectedException FooException "bad thing" 42')

        # When
        expected = extract_expected_exception(symbol)

        # Then
        assert expected is not None
        assert expected.to_dict() == {
            "class": "FooException",
            "code": 42,
            "message": "bad thing",
            "message_regex": "",
        }
