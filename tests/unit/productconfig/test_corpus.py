"""Tests for corpus construction, integrity checks and lookups."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from productconfig.corpus import PropertyCorpus
from productconfig.errors import CorpusIntegrityError, InvalidVersionError
from productconfig.loader import CorpusLoader
from productconfig.types import RangeEnd
from productconfig.version import Version


def _prop(name: str, **fields: Any) -> dict[str, Any]:
    prop: dict[str, Any] = {
        "option_names": [{"name": name, "kind": "conf"}],
        "datatype": {"type": "string"},
        "as_of_version": "0.1.0",
    }
    prop.update(fields)
    return prop


def _build(*props: dict[str, Any], **settings: Any) -> PropertyCorpus:
    raw: dict[str, Any] = {"config_options": list(props)}
    if settings:
        raw["config_settings"] = settings
    return CorpusLoader().load_from_dict(raw)


# ---------------------------------------------------------------------------
# Lookups on the shared test corpus
# ---------------------------------------------------------------------------


class TestLookup:
    def test_every_name_form_resolves_to_one_property(self, corpus: PropertyCorpus):
        by_conf = corpus.lookup("conf.security")
        assert by_conf is not None
        assert corpus.lookup("ENV_SECURITY") is by_conf
        assert corpus.lookup("--security") is by_conf
        assert by_conf.name == "conf.security"

    def test_unknown_name(self, corpus: PropertyCorpus):
        assert corpus.lookup("conf.nope") is None
        assert "conf.nope" not in corpus
        with pytest.raises(KeyError):
            corpus.get("conf.nope")

    def test_iteration_in_corpus_order(self, corpus: PropertyCorpus):
        names = [p.name for p in corpus]
        assert names[0] == "ENV_INTEGER_PORT_MIN_MAX"
        assert names.index("conf.security") < names.index("conf.security.password")
        assert len(corpus) == len(names) == 12
        assert [p.index for p in corpus] == list(range(12))

    def test_range_end_default(self, corpus: PropertyCorpus):
        assert corpus.range_end == RangeEnd.EXCLUSIVE

    def test_exists_and_deprecated_at(self, corpus: PropertyCorpus):
        port = corpus.get("conf.integer.port.min.max")
        assert not port.exists_at(Version.parse("0.4.9"))
        assert port.exists_at(Version.parse("0.5.0"))
        deprecated = corpus.get("conf.property.string.deprecated")
        assert not deprecated.deprecated_at(Version.parse("0.3.9"))
        assert deprecated.deprecated_at(Version.parse("0.4.0"))
        assert not port.deprecated_at(Version.parse("9.0.0"))

    def test_supplied_value_through_aliases(self, corpus: PropertyCorpus):
        security = corpus.get("conf.security")
        assert corpus.supplied_value(security, {"ENV_SECURITY": "true"}) == "true"
        assert corpus.supplied_value(security, {"conf.other": "x"}) is None


# ---------------------------------------------------------------------------
# Effective defaults and recommendations
# ---------------------------------------------------------------------------


class TestEffectiveValues:
    def test_default_by_version(self, corpus: PropertyCorpus):
        assert corpus.effective_default("conf.integer.port.min.max", "0.5.0") == "8000"
        assert corpus.effective_default("conf.integer.port.min.max", "0.9.9") == "8000"
        assert corpus.effective_default("conf.integer.port.min.max", "1.0.0") == "8080"
        assert corpus.effective_default("ENV_INTEGER_PORT_MIN_MAX", "3.0") == "8080"

    def test_no_default_before_as_of(self, corpus: PropertyCorpus):
        assert corpus.effective_default("conf.integer.port.min.max", "0.1.0") is None

    def test_missing_from_version_defaults_to_as_of(self, corpus: PropertyCorpus):
        assert corpus.effective_default("conf.property.string.memory", "0.1.0") == "1g"
        assert corpus.effective_default("conf.property.string.memory", "0.0.9") is None

    def test_bool_default_stringified(self, corpus: PropertyCorpus):
        assert corpus.effective_default("conf.security", "1.0.0") == "false"

    def test_recommended(self, corpus: PropertyCorpus):
        assert corpus.effective_recommended("conf.float.ratio", "1.9.9") == "0.75"
        assert corpus.effective_recommended("conf.float.ratio", "2.0.0") is None
        assert corpus.effective_recommended("conf.integer.port.min.max", "0.9.0") is None
        assert corpus.effective_recommended("conf.integer.port.min.max", Version.parse("1.0")) == "8080"

    def test_property_without_values(self, corpus: PropertyCorpus):
        assert corpus.effective_default("conf.string.max.length", "1.0.0") is None

    def test_unknown_property(self, corpus: PropertyCorpus):
        with pytest.raises(KeyError):
            corpus.effective_default("conf.nope", "1.0.0")

    def test_invalid_query_version(self, corpus: PropertyCorpus):
        with pytest.raises(InvalidVersionError):
            corpus.effective_default("conf.security", "latest")

    def test_inclusive_range_end(self):
        corpus = _build(
            _prop(
                "conf.x",
                default_values=[
                    {"value": "a", "from_version": "0.1.0", "to_version": "0.9.0"},
                    {"value": "b", "from_version": "0.9.1"},
                ],
            ),
            range_end="inclusive",
        )
        assert corpus.range_end == RangeEnd.INCLUSIVE
        assert corpus.effective_default("conf.x", "0.9.0") == "a"
        assert corpus.effective_default("conf.x", "0.9.0.5") is None
        assert corpus.effective_default("conf.x", "0.9.1") == "b"

    def test_exclusive_range_end(self):
        corpus = _build(
            _prop(
                "conf.x",
                default_values=[{"value": "a", "from_version": "0.1.0", "to_version": "0.9.0"}],
            )
        )
        assert corpus.effective_default("conf.x", "0.8.99") == "a"
        assert corpus.effective_default("conf.x", "0.9.0") is None


# ---------------------------------------------------------------------------
# Integrity checks
# ---------------------------------------------------------------------------


class TestIntegrity:
    def test_duplicate_name_across_properties(self):
        with pytest.raises(CorpusIntegrityError, match="already used") as exc_info:
            _build(_prop("conf.x"), _prop("conf.x"))
        assert exc_info.value.property_name == "conf.x"

    def test_duplicate_name_within_property(self):
        dup = _prop("conf.x")
        dup["option_names"].append({"name": "conf.x", "kind": "env"})
        with pytest.raises(CorpusIntegrityError):
            _build(dup)

    def test_overlapping_defaults(self):
        with pytest.raises(CorpusIntegrityError, match="overlap"):
            _build(
                _prop(
                    "conf.x",
                    default_values=[
                        {"value": "a", "from_version": "0.1.0", "to_version": "1.0.0"},
                        {"value": "b", "from_version": "0.5.0"},
                    ],
                )
            )

    def test_adjacent_ranges_overlap_when_inclusive(self):
        prop = _prop(
            "conf.x",
            default_values=[
                {"value": "a", "from_version": "0.1.0", "to_version": "1.0.0"},
                {"value": "b", "from_version": "1.0.0"},
            ],
        )
        assert len(_build(copy.deepcopy(prop))) == 1
        with pytest.raises(CorpusIntegrityError, match="overlap"):
            _build(prop, range_end="inclusive")

    def test_range_before_as_of_version(self):
        with pytest.raises(CorpusIntegrityError, match="before as_of_version"):
            _build(
                _prop(
                    "conf.x",
                    as_of_version="0.5.0",
                    recommended_values=[{"value": "a", "from_version": "0.1.0"}],
                )
            )

    def test_invalid_version_in_corpus(self):
        with pytest.raises(CorpusIntegrityError, match="as_of_version"):
            _build(_prop("conf.x", as_of_version="one"))
        with pytest.raises(CorpusIntegrityError, match="deprecated_since"):
            _build(_prop("conf.x", deprecated_since="soon"))

    def test_unknown_unit(self):
        with pytest.raises(CorpusIntegrityError, match="Unknown unit"):
            _build(_prop("conf.x", datatype={"type": "string", "unit": "time"}))

    def test_min_greater_than_max(self):
        with pytest.raises(CorpusIntegrityError, match="greater than max"):
            _build(_prop("conf.x", datatype={"type": "integer", "min": 10, "max": 1}))

    def test_malformed_bound(self):
        with pytest.raises(CorpusIntegrityError, match="not valid for integer"):
            _build(_prop("conf.x", datatype={"type": "integer", "max": "1.5"}))

    def test_bool_with_bounds(self):
        with pytest.raises(CorpusIntegrityError, match="bool"):
            _build(_prop("conf.x", datatype={"type": "bool", "max": 1}))

    def test_array_with_bounds(self):
        with pytest.raises(CorpusIntegrityError, match="array datatype cannot declare min/max"):
            _build(_prop("conf.x", datatype={"type": "array", "min": 1}))

    def test_oversized_integer_bound(self):
        with pytest.raises(CorpusIntegrityError, match="not valid for integer"):
            _build(_prop("conf.x", datatype={"type": "integer", "max": "9" * 5000}))

    def test_overflowing_float_bound(self):
        with pytest.raises(CorpusIntegrityError, match="not valid for float"):
            _build(_prop("conf.x", datatype={"type": "float", "max": "1e999"}))

    def test_default_unit_outside_accepted_units(self):
        datatype = {"type": "integer", "accepted_units": ["ms", "s"], "default_unit": "h"}
        with pytest.raises(CorpusIntegrityError, match="default_unit 'h'"):
            _build(_prop("conf.timeout", datatype=datatype))

    def test_accepted_units_are_not_unit_patterns(self):
        datatype = {"type": "array", "accepted_units": ["ms", "s"], "default_unit": "ms"}
        corpus = _build(_prop("conf.timeouts", datatype=datatype))
        assert corpus.get("conf.timeouts").spec.datatype.default_unit == "ms"

    def test_dangling_dependency(self):
        with pytest.raises(CorpusIntegrityError, match="unknown property 'conf.y'"):
            _build(_prop("conf.x", depends_on=[{"property": "conf.y", "value": "1"}]))

    def test_self_dependency(self):
        with pytest.raises(CorpusIntegrityError, match="itself"):
            _build(_prop("conf.x", depends_on=[{"property": "conf.x", "value": "1"}]))

    def test_dependency_on_later_property(self):
        corpus = _build(
            _prop("conf.x", depends_on=[{"property": "conf.y", "value": "1"}]),
            _prop("conf.y"),
        )
        assert len(corpus) == 2

    def test_dangling_replacement(self):
        with pytest.raises(CorpusIntegrityError, match="deprecated_for"):
            _build(_prop("conf.x", deprecated_since="0.2.0", deprecated_for=["conf.z"]))
