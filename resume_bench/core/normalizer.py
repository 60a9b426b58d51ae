"""
Schema normalization.

Profiles emit partial, loosely-typed mappings. ``normalize`` reconciles any of
them into one ResumeRecord using the declarative schema table below:

- missing or None fields get the type default ("" or [])
- scalars are coerced to str; a scalar where a list is expected becomes [value]
- a bare string where an item mapping is expected becomes that item's primary
  text field (experience -> description, education -> details, ...)
- synonym fill: empty responsibilities <- description, empty position <- title
- unknown keys are preserved

It never raises on shape problems and is idempotent:
normalize(normalize(x)) == normalize(x).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel

from resume_bench.core.schemas import (
    EducationEntry,
    ExperienceEntry,
    HonorEntry,
    ProjectEntry,
    ResumeRecord,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldRule:
    name: str
    kind: str  # "string", "string_list" or "items"
    required: bool = False
    item_model: Optional[Type[BaseModel]] = None
    # item field a bare string lands in
    primary: Optional[str] = None


@dataclass(frozen=True)
class ItemRule:
    scalars: Tuple[str, ...]
    lists: Tuple[str, ...]
    # (target, source): fill target from source when target is empty
    synonyms: Tuple[Tuple[str, str], ...] = ()


RECORD_SCHEMA: Tuple[FieldRule, ...] = (
    FieldRule("name", "string", required=True),
    FieldRule("title", "string"),
    FieldRule("email", "string", required=True),
    FieldRule("phone", "string", required=True),
    FieldRule("linkedin", "string"),
    FieldRule("github", "string"),
    FieldRule("address", "string"),
    FieldRule("location", "string"),
    FieldRule("summary", "string"),
    FieldRule("experience", "items", required=True, item_model=ExperienceEntry, primary="description"),
    FieldRule("education", "items", required=True, item_model=EducationEntry, primary="details"),
    FieldRule("skills", "string_list", required=True),
    FieldRule("languages", "string_list"),
    FieldRule("certifications", "string_list"),
    FieldRule("projects", "items", item_model=ProjectEntry, primary="name"),
    FieldRule("honors", "items", item_model=HonorEntry, primary="title"),
    FieldRule("references", "string_list"),
)

ITEM_SCHEMAS: Dict[Type[BaseModel], ItemRule] = {
    ExperienceEntry: ItemRule(
        scalars=("title", "position", "company", "location", "period"),
        lists=("responsibilities", "description"),
        synonyms=(("responsibilities", "description"), ("position", "title")),
    ),
    EducationEntry: ItemRule(
        scalars=("degree", "institution", "location", "period"),
        lists=("details",),
    ),
    ProjectEntry: ItemRule(
        scalars=("name", "timeframe", "link"),
        lists=("description",),
    ),
    HonorEntry: ItemRule(
        scalars=("title", "date"),
        lists=("description",),
    ),
}


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return " ".join(_to_string(v) for v in value if v is not None).strip()
    return str(value)


def _to_string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_to_string(v) for v in value if v is not None]
    return [_to_string(value)]


def _normalize_item(value: Any, model: Type[BaseModel], primary: str) -> Dict[str, Any]:
    rule = ITEM_SCHEMAS[model]
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if not isinstance(value, Mapping):
        value = {primary: value}

    known = rule.scalars + rule.lists
    item: Dict[str, Any] = {k: v for k, v in value.items() if isinstance(k, str) and k not in known}
    for key in rule.scalars:
        item[key] = _to_string(value.get(key))
    for key in rule.lists:
        item[key] = _to_string_list(value.get(key))

    for target, source in rule.synonyms:
        if not item.get(target) and item.get(source):
            item[target] = list(item[source]) if isinstance(item[source], list) else item[source]
    return item


def _normalize_items(value: Any, field_rule: FieldRule) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    return [
        _normalize_item(v, field_rule.item_model, field_rule.primary)
        for v in value
        if v is not None
    ]


def normalize(raw: Union[Mapping[str, Any], ResumeRecord, None]) -> ResumeRecord:
    """Reconcile a partial profile output (or an existing record) into a ResumeRecord."""
    if raw is None:
        raw = {}
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        logger.warning(f"normalize() got {type(raw).__name__}, expected a mapping; using empty record")
        raw = {}

    schema_names = {rule.name for rule in RECORD_SCHEMA}
    out: Dict[str, Any] = {k: v for k, v in raw.items() if isinstance(k, str) and k not in schema_names}

    missing = [rule.name for rule in RECORD_SCHEMA if rule.required and raw.get(rule.name) is None]
    if missing:
        logger.debug(f"Required fields absent, using defaults: {missing}")

    for rule in RECORD_SCHEMA:
        value = raw.get(rule.name)
        if rule.kind == "string":
            out[rule.name] = _to_string(value)
        elif rule.kind == "string_list":
            out[rule.name] = _to_string_list(value)
        else:
            out[rule.name] = _normalize_items(value, rule)

    return ResumeRecord.model_validate(out)
