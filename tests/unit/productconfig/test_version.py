"""Tests for dotted versions and version-scoped value resolution."""

from __future__ import annotations

import pytest

from productconfig.errors import CorpusIntegrityError, InvalidVersionError
from productconfig.version import (
    Version,
    VersionedEntry,
    VersionRange,
    check_non_overlapping,
    resolve_effective,
)


def v(text: str) -> Version:
    return Version.parse(text)


def _entry(start: str, end: str | None, value: str, inclusive: bool = False) -> VersionedEntry[str]:
    return VersionedEntry(VersionRange(v(start), v(end) if end else None, inclusive), value)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------


class TestVersion:
    def test_parse(self):
        assert v("1.2.3").components == (1, 2, 3)
        assert str(v("1.2.3")) == "1.2.3"

    def test_numeric_not_lexicographic(self):
        assert v("0.10.0") > v("0.9.0")
        assert v("10.0") > v("9.99.99")

    def test_missing_components_are_zero(self):
        assert v("1.0") == v("1.0.0")
        assert hash(v("1")) == hash(v("1.0.0"))
        assert v("1.0.1") > v("1.0")

    def test_ordering_helpers(self):
        assert v("0.4.0") <= v("0.4")
        assert v("0.5.0") >= v("0.4.9")
        assert sorted([v("1.0.0"), v("0.1.0"), v("0.5.0")]) == [v("0.1.0"), v("0.5.0"), v("1.0.0")]

    def test_surrounding_whitespace_stripped(self):
        assert v(" 1.0.0 ") == v("1.0.0")

    @pytest.mark.parametrize(
        "text", ["", "1.0.0-beta", "v1.0", "1..0", "a.b.c", "1.0.", "\u0661.\u0660", "1.0\n1"]
    )
    def test_invalid(self, text: str):
        with pytest.raises(InvalidVersionError):
            v(text)

    def test_non_string_rejected(self):
        with pytest.raises(InvalidVersionError):
            Version.parse(100)  # type: ignore[arg-type]

    def test_oversized_component_rejected(self):
        with pytest.raises(InvalidVersionError):
            v("1." + "9" * 5000)


    def test_invalid_version_is_value_error(self):
        with pytest.raises(ValueError):
            v("latest")


# ---------------------------------------------------------------------------
# VersionRange
# ---------------------------------------------------------------------------


class TestVersionRange:
    def test_exclusive_end(self):
        r = VersionRange(v("0.5.0"), v("1.0.0"))
        assert r.contains(v("0.5.0"))
        assert r.contains(v("0.9.9"))
        assert not r.contains(v("1.0.0"))
        assert not r.contains(v("0.4.9"))

    def test_inclusive_end(self):
        r = VersionRange(v("0.5.0"), v("1.0.0"), end_inclusive=True)
        assert r.contains(v("1.0.0"))
        assert not r.contains(v("1.0.1"))

    def test_open_end(self):
        r = VersionRange(v("1.0.0"))
        assert r.contains(v("99.0.0"))
        assert str(r) == "[1.0.0, ∞)"

    def test_is_empty(self):
        assert VersionRange(v("1.0.0"), v("1.0.0")).is_empty()
        assert not VersionRange(v("1.0.0"), v("1.0.0"), end_inclusive=True).is_empty()
        assert VersionRange(v("2.0.0"), v("1.0.0"), end_inclusive=True).is_empty()

    def test_adjacent_exclusive_ranges_do_not_overlap(self):
        first = VersionRange(v("0.5.0"), v("1.0.0"))
        second = VersionRange(v("1.0.0"))
        assert not first.overlaps(second)
        assert not second.overlaps(first)

    def test_adjacent_inclusive_ranges_overlap(self):
        first = VersionRange(v("0.5.0"), v("1.0.0"), end_inclusive=True)
        second = VersionRange(v("1.0.0"), None, end_inclusive=True)
        assert first.overlaps(second)

    def test_str(self):
        assert str(VersionRange(v("0.5.0"), v("1.0.0"))) == "[0.5.0, 1.0.0)"
        assert str(VersionRange(v("0.5.0"), v("1.0.0"), True)) == "[0.5.0, 1.0.0]"


# ---------------------------------------------------------------------------
# Non-overlap check and resolution
# ---------------------------------------------------------------------------


class TestResolveEffective:
    def test_exactly_one_value_inside_ranges(self):
        entries = check_non_overlapping(
            [_entry("1.0.0", None, "b"), _entry("0.5.0", "1.0.0", "a")], "default_values"
        )
        assert resolve_effective(entries, v("0.5.0")) == "a"
        assert resolve_effective(entries, v("0.9.9")) == "a"
        assert resolve_effective(entries, v("1.0.0")) == "b"
        assert resolve_effective(entries, v("5.0.0")) == "b"

    def test_gap_and_before_start_resolve_to_none(self):
        entries = check_non_overlapping(
            [_entry("0.1.0", "0.3.0", "a"), _entry("0.5.0", None, "b")], "default_values"
        )
        assert resolve_effective(entries, v("0.0.1")) is None
        assert resolve_effective(entries, v("0.3.0")) is None
        assert resolve_effective(entries, v("0.4.9")) is None

    def test_inclusive_end_boundary(self):
        entries = check_non_overlapping(
            [_entry("0.1.0", "0.3.0", "a", inclusive=True)], "default_values"
        )
        assert resolve_effective(entries, v("0.3.0")) == "a"
        assert resolve_effective(entries, v("0.3.1")) is None

    def test_sorted_by_start(self):
        entries = check_non_overlapping(
            [_entry("2.0.0", None, "c"), _entry("0.1.0", "1.0.0", "a"), _entry("1.0.0", "2.0.0", "b")],
            "default_values",
        )
        assert [e.value for e in entries] == ["a", "b", "c"]

    def test_empty_list(self):
        assert resolve_effective(check_non_overlapping([], "x"), v("1.0.0")) is None

    def test_overlap_rejected(self):
        with pytest.raises(CorpusIntegrityError, match="overlap") as exc_info:
            check_non_overlapping(
                [_entry("0.1.0", "1.0.0", "a"), _entry("0.9.0", None, "b")],
                "default_values",
                property_name="conf.x",
            )
        assert exc_info.value.property_name == "conf.x"

    def test_two_open_ranges_overlap(self):
        with pytest.raises(CorpusIntegrityError):
            check_non_overlapping(
                [_entry("0.1.0", None, "a"), _entry("0.2.0", None, "b")], "recommended_values"
            )

    def test_empty_range_rejected(self):
        with pytest.raises(CorpusIntegrityError, match="empty"):
            check_non_overlapping([_entry("1.0.0", "1.0.0", "a")], "default_values")
