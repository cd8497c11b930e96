"""
Data model for a feature flag export.
Only the fields needed to find flag-to-flag references are read;
everything else on a record is ignored.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .exceptions import MalformedFlagDataError

IN_SPLIT = "IN_SPLIT"


def _require_mapping(record: Any, what: str) -> Dict[str, Any]:
    if not isinstance(record, dict):
        raise MalformedFlagDataError(
            f"Expected {what} to be an object, got {type(record).__name__}"
        )
    return record


def _optional_list(record: Dict[str, Any], key: str, what: str) -> List[Any]:
    value = record.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedFlagDataError(
            f"Expected '{key}' of {what} to be a list, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class Matcher:
    """One condition test within a rule."""
    type: str
    split_name: Optional[str] = None  # depends.splitName, IN_SPLIT only

    @property
    def is_flag_reference(self) -> bool:
        return self.type == IN_SPLIT and bool(self.split_name)

    @classmethod
    def from_dict(cls, record: Any) -> "Matcher":
        record = _require_mapping(record, "matcher")
        matcher_type = str(record.get("type", ""))
        depends = record.get("depends")
        if matcher_type != IN_SPLIT or depends is None:
            return cls(type=matcher_type)

        depends = _require_mapping(depends, "IN_SPLIT 'depends'")
        split_name = depends.get("splitName")
        if split_name is not None and not isinstance(split_name, str):
            raise MalformedFlagDataError(
                f"Expected 'splitName' to be a string, got {type(split_name).__name__}"
            )
        return cls(type=matcher_type, split_name=split_name)


@dataclass(frozen=True)
class Condition:
    matchers: List[Matcher] = field(default_factory=list)

    @classmethod
    def from_dict(cls, record: Any) -> "Condition":
        record = _require_mapping(record, "condition")
        return cls(
            matchers=[Matcher.from_dict(m) for m in _optional_list(record, "matchers", "condition")]
        )


@dataclass(frozen=True)
class Rule:
    """One conditional branch within a flag."""
    condition: Optional[Condition] = None

    @classmethod
    def from_dict(cls, record: Any) -> "Rule":
        record = _require_mapping(record, "rule")
        condition = record.get("condition")
        return cls(condition=Condition.from_dict(condition) if condition is not None else None)


@dataclass(frozen=True)
class FlagDefinition:
    """One entry of the export's `objects` list."""
    name: str
    id: Optional[str] = None
    rules: List[Rule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, record: Any) -> "FlagDefinition":
        record = _require_mapping(record, "flag")
        name = record.get("name")
        if not isinstance(name, str) or not name:
            raise MalformedFlagDataError(f"Flag record without a valid 'name': {name!r}")

        flag_id = record.get("id")
        return cls(
            name=name,
            id=str(flag_id) if flag_id is not None else None,
            rules=[Rule.from_dict(r) for r in _optional_list(record, "rules", f"flag '{name}'")],
        )


@dataclass(frozen=True)
class Dependency:
    """Edge: `dependent` has a rule that references `dependency`."""
    dependent: str
    dependency: str


def parse_flag_export(document: Any) -> List[FlagDefinition]:
    """Parse the top-level export document into flag definitions."""
    document = _require_mapping(document, "export document")
    if "objects" not in document:
        raise MalformedFlagDataError("Export document has no 'objects' field")
    return [FlagDefinition.from_dict(obj) for obj in _optional_list(document, "objects", "export document")]
