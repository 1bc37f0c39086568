"""Unit tests for catalog.py — category table and tag validation."""

import pytest

from pdf_admin.catalog import (
    DEPARTMENTS,
    PREDEFINED_COLORS,
    TAG_CATEGORIES,
    YEARS,
    TagValidationError,
    category_info,
    is_filter_all,
    validate_tag,
)


class TestCategoryInfo:
    def test_known_category(self) -> None:
        info = category_info("research")
        assert info.label == "Research"
        assert info.color == "#84CC16"

    @pytest.mark.parametrize("value", ["unknown", None, ""])
    def test_unknown_falls_back_to_other(self, value: str | None) -> None:
        assert category_info(value).value == "other"

    def test_table_values_are_unique(self) -> None:
        values = [c.value for c in TAG_CATEGORIES]
        assert len(values) == len(set(values))

    def test_predefined_colors_pass_validation(self) -> None:
        for color in PREDEFINED_COLORS:
            validate_tag("Tag", color=color)


class TestIsFilterAll:
    @pytest.mark.parametrize("value", [None, "", "  ", "all", "All", "ALL"])
    def test_all_values(self, value: object) -> None:
        assert is_filter_all(value) is True

    @pytest.mark.parametrize("value", ["CSE", 2, "admin"])
    def test_real_filters(self, value: object) -> None:
        assert is_filter_all(value) is False


class TestValidateTag:
    def test_valid_tag(self) -> None:
        validate_tag("Final Year", category="academic", color="#abc", description="x" * 200)

    def test_collects_every_problem(self) -> None:
        with pytest.raises(TagValidationError) as exc_info:
            validate_tag("a", category="misc", color="red", description="x" * 201)

        assert len(exc_info.value.problems) == 4

    def test_name_too_long(self) -> None:
        with pytest.raises(TagValidationError, match="cannot exceed 50"):
            validate_tag("n" * 51)

    def test_name_is_trimmed_before_length_check(self) -> None:
        with pytest.raises(TagValidationError, match="at least 2"):
            validate_tag("  a  ")


def test_form_choices() -> None:
    assert DEPARTMENTS == ("AIML", "CSE", "ECE", "EEE", "IT")
    assert YEARS == (1, 2, 3, 4)
