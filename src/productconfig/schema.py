"""
Pydantic v2 models for the property-specification corpus format.

A corpus declares the unit patterns (``config_settings``) and every
configurable property (``config_options``) of a product.  Models validate
the *shape* of the file; cross-entry consistency (overlapping version
ranges, dangling references, unresolvable units) is checked afterwards by
``PropertyCorpus``.

All models use ``extra="forbid"`` to reject unknown keys at parse time.

Usage::

    from productconfig.schema import PropertyCorpusSpec
    import yaml

    with open("properties.yaml") as fh:
        raw = yaml.safe_load(fh)
    spec = PropertyCorpusSpec.model_validate(raw)
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from productconfig.types import DatatypeKind, Importance, NameKind, RangeEnd


def _stringify(value: Any) -> Any:
    """Accept YAML scalars for fields the corpus historically writes as strings."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class UnitSpec(BaseModel):
    """A named regular expression used to validate string values."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1, description="Unit name referenced by datatypes")
    regex: Optional[str] = Field(None, description="Regular expression for the unit")
    examples: list[str] = Field(
        default_factory=list,
        description="Values the pattern must accept (documentation and self-test only)",
    )


class CorpusSettings(BaseModel):
    """Corpus-wide settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    unit: list[UnitSpec] = Field(default_factory=list)
    range_end: RangeEnd = Field(
        RangeEnd.EXCLUSIVE,
        description="Whether to_version bounds are exclusive or inclusive",
    )


# ---------------------------------------------------------------------------
# Property parts
# ---------------------------------------------------------------------------


class OptionName(BaseModel):
    """One accepted name of a property."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    kind: NameKind


class Datatype(BaseModel):
    """Declared datatype with optional bounds and unit."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: DatatypeKind
    min: Optional[str] = Field(
        None, description="Inclusive lower bound (numeric) or minimum length (string)"
    )
    max: Optional[str] = Field(
        None, description="Inclusive upper bound (numeric) or maximum length (string)"
    )
    unit: Optional[str] = Field(None, description="Unit pattern name")
    accepted_units: list[str] = Field(
        default_factory=list, description="Units a value may be expressed in"
    )
    default_unit: Optional[str] = Field(
        None, description="Unit assumed when a value carries none"
    )

    @field_validator("min", "max", mode="before")
    @classmethod
    def _normalize_bounds(cls, v: Any) -> Any:
        return _stringify(v)


class VersionedValue(BaseModel):
    """A default or recommended value scoped to a version range."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: str
    from_version: Optional[str] = Field(
        None, description="Inclusive start; defaults to the property's as_of_version"
    )
    to_version: Optional[str] = Field(None, description="End of the range")

    @field_validator("value", "from_version", "to_version", mode="before")
    @classmethod
    def _normalize_value(cls, v: Any) -> Any:
        return _stringify(v)


class RoleRequirement(BaseModel):
    """Requiredness of a property for one role."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    required: bool = False


class Dependency(BaseModel):
    """A prerequisite: ``property`` must be supplied with exactly ``value``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    property: str = Field(..., min_length=1, description="Any name of the referenced property")
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _normalize_value(cls, v: Any) -> Any:
        return _stringify(v)


# ---------------------------------------------------------------------------
# Property
# ---------------------------------------------------------------------------


class PropertySpec(BaseModel):
    """Full metadata of one configurable property."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    option_names: list[OptionName] = Field(..., min_length=1)
    datatype: Datatype
    default_values: list[VersionedValue] = Field(default_factory=list)
    recommended_values: list[VersionedValue] = Field(default_factory=list)
    roles: list[RoleRequirement] = Field(default_factory=list)
    allowed_values: Optional[list[str]] = Field(
        None, description="Closed set of legal values; [] marks a retired property"
    )
    depends_on: list[Dependency] = Field(default_factory=list)
    as_of_version: str = Field(..., min_length=1)
    deprecated_since: Optional[str] = None
    deprecated_for: list[str] = Field(
        default_factory=list, description="Names of replacement properties"
    )
    restart_required: Optional[bool] = None
    importance: Optional[Importance] = Field(
        None, description="required makes the property mandatory for every role set"
    )
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    additional_doc: list[str] = Field(default_factory=list)

    @field_validator("as_of_version", "deprecated_since", mode="before")
    @classmethod
    def _normalize_versions(cls, v: Any) -> Any:
        return _stringify(v)

    @field_validator("allowed_values", mode="before")
    @classmethod
    def _normalize_allowed(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_stringify(item) for item in v]
        return v

    @property
    def name(self) -> str:
        """First declared name, used as the property's display name."""
        return self.option_names[0].name

    @property
    def names(self) -> list[str]:
        return [n.name for n in self.option_names]

    def role(self, role_name: str) -> Optional[RoleRequirement]:
        for role in self.roles:
            if role.name == role_name:
                return role
        return None

    def is_required_for(self, roles: set[str] | frozenset[str]) -> bool:
        if self.importance == Importance.REQUIRED:
            return True
        return any(r.required and r.name in roles for r in self.roles)


# ---------------------------------------------------------------------------
# Top-level corpus
# ---------------------------------------------------------------------------


class PropertyCorpusSpec(BaseModel):
    """
    Root model for a property-specification corpus file.

    Declares unit patterns and the configurable properties of a product.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    config_settings: CorpusSettings = Field(default_factory=CorpusSettings)
    config_options: list[PropertySpec] = Field(default_factory=list)
