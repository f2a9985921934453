"""
Form State.

Per-field form entries, aggregate validity and the merge engine that every
node editor form uses to apply partial updates.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationFailure:
    """A single field-level validation message."""

    message: str


@dataclass(frozen=True)
class FormEntry:
    """A field value with its validation failures."""

    value: Any = None
    validation_failures: Tuple[ValidationFailure, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.validation_failures


# =============================================================================
# Array Items
# =============================================================================


@dataclass(frozen=True)
class Raw:
    """An array element stored as a bare value carrying a ``uuid``."""

    value: Any


@dataclass(frozen=True)
class Wrapped:
    """An array element stored as a form entry whose value carries a ``uuid``."""

    entry: FormEntry


ArrayItem = Union[Raw, Wrapped]


@dataclass(frozen=True)
class RemoveItems:
    """Removal of the elements of an array field that share a uuid with ``items``."""

    field: str
    items: Tuple[ArrayItem, ...] = ()


Removal = Union[str, RemoveItems]


def as_array_item(item: Any) -> ArrayItem:
    """Tag an element: form entries are wrapped, anything else is raw."""
    if isinstance(item, (Raw, Wrapped)):
        return item
    if isinstance(item, FormEntry):
        return Wrapped(item)
    return Raw(item)


def _payload(item: ArrayItem) -> Any:
    if isinstance(item, Wrapped):
        return item.entry.value
    return item.value


def _stored(item: ArrayItem) -> Any:
    if isinstance(item, Wrapped):
        return item.entry
    return item.value


def item_uuid(item: ArrayItem) -> Optional[str]:
    """The identity of an array element, or None when it has none."""
    payload = _payload(item)
    if isinstance(payload, Mapping):
        return payload.get("uuid")
    return getattr(payload, "uuid", None)


# =============================================================================
# Form State
# =============================================================================


class FormState:
    """
    Immutable form state: named fields plus an aggregate ``valid`` flag.

    Fields hold a FormEntry, a list of array elements, or a plain value
    (for example the chosen action type of the update contact form).
    """

    def __init__(self, fields: Optional[Dict[str, Any]] = None, valid: bool = True, **kwargs: Any):
        merged = dict(fields or {})
        merged.update(kwargs)
        self._fields = merged
        self.valid = valid

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __getattr__(self, key: str) -> Any:
        if key.startswith("_"):
            raise AttributeError(key)
        try:
            return self._fields[key]
        except KeyError:
            raise AttributeError(key) from None

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormState):
            return NotImplemented
        return self.valid == other.valid and self._fields == other._fields

    def __repr__(self) -> str:
        return f"FormState(valid={self.valid}, fields={self._fields!r})"

    def get(self, key: str, default: Any = None) -> Any:
        return self._fields.get(key, default)

    @property
    def fields(self) -> Dict[str, Any]:
        return dict(self._fields)

    def failures(self) -> Dict[str, Tuple[ValidationFailure, ...]]:
        """Validation failures keyed by field name."""
        return {
            key: entry.validation_failures
            for key, entry in self._fields.items()
            if isinstance(entry, FormEntry) and entry.validation_failures
        }


def compute_valid(fields: Mapping[str, Any]) -> bool:
    """True iff no field entry carries validation failures."""
    for entry in fields.values():
        if isinstance(entry, FormEntry) and entry.validation_failures:
            return False
    return True


def _upsert(existing: List[Any], items: Sequence[Any], key: str) -> List[Any]:
    updated = list(existing)
    for raw_item in items:
        item = as_array_item(raw_item)
        uuid = item_uuid(item)
        if not uuid:
            logger.warning(f"Skipping '{key}' item without a uuid")
            continue

        index = next(
            (i for i, current in enumerate(updated) if item_uuid(as_array_item(current)) == uuid),
            -1,
        )
        if index > -1:
            updated[index] = _stored(item)
        else:
            updated.append(_stored(item))
    return updated


def _drop(existing: List[Any], doomed: Set[str]) -> List[Any]:
    return [current for current in existing if item_uuid(as_array_item(current)) not in doomed]


def _with_items(current: Any, key: str, change: Callable[..., List[Any]], *args: Any) -> Any:
    """Apply ``change`` to an array field held bare or inside a FormEntry."""
    if current is None:
        return change([], *args)
    if isinstance(current, FormEntry):
        if isinstance(current.value, (list, tuple)):
            return FormEntry(change(list(current.value), *args), current.validation_failures)
    elif isinstance(current, (list, tuple)):
        return change(list(current), *args)
    logger.warning(f"Skipping array update of non-array field '{key}'")
    return current


def merge_form(
    form: FormState,
    updates: Mapping[str, Any],
    removals: Sequence[Removal] = (),
) -> FormState:
    """
    Merge a partial update into a form.

    Args:
        form: Current form state (left untouched)
        updates: Field values to apply. List values are upserted by uuid
            into the existing array field instead of replacing it.
        removals: Field names to delete, or RemoveItems selecting array
            elements to drop by uuid

    Returns:
        New FormState with ``valid`` recomputed over the merged fields
    """
    fields = form.fields
    plain: Dict[str, Any] = {}

    for key, value in updates.items():
        if key == "valid":
            continue
        if isinstance(value, (list, tuple)):
            fields[key] = _with_items(fields.get(key), key, _upsert, value, key)
        else:
            plain[key] = value

    for removal in removals:
        if not isinstance(removal, RemoveItems):
            continue
        doomed = {item_uuid(as_array_item(i)) for i in removal.items} - {None}
        if doomed and removal.field in fields:
            fields[removal.field] = _with_items(fields[removal.field], removal.field, _drop, doomed)

    fields.update(plain)

    for removal in removals:
        if isinstance(removal, str):
            fields.pop(removal, None)

    valid = compute_valid(fields)
    logger.debug(f"Merged {sorted(updates)} into form (valid={valid})")
    return FormState(fields, valid=valid)
