"""
Localization.

Resolves a per-language view of a translatable object from the flow's
localization map (language -> object uuid -> translated keys) and produces
updated maps when translations are saved.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .config import ActionType
from .models import Action, Asset, Case, Exit, LocalizableObject

logger = logging.getLogger(__name__)

LocalizationMap = Dict[str, Dict[str, Dict[str, Any]]]

# Keys a translator may override, per kind of object
LOCALIZABLE_KEYS: Dict[ActionType, Tuple[str, ...]] = {
    ActionType.SEND_MSG: ("text", "quick_replies"),
    ActionType.SEND_BROADCAST: ("text",),
}
CASE_LOCALIZABLE_KEYS: Tuple[str, ...] = ("arguments",)
EXIT_LOCALIZABLE_KEYS: Tuple[str, ...] = ("name",)


def _language_id(language: Union[str, Asset]) -> str:
    return language.id if isinstance(language, Asset) else language


def _object_uuid(obj: LocalizableObject) -> Optional[str]:
    if isinstance(obj, Mapping):
        return obj.get("uuid")
    return getattr(obj, "uuid", None)


def _apply_overrides(obj: LocalizableObject, overrides: Mapping[str, Any]) -> LocalizableObject:
    if isinstance(obj, Mapping):
        return {**obj, **overrides}
    return type(obj).from_dict({**obj.to_dict(), **overrides})


class LocalizedObject:
    """
    Translated view of one object in one language.

    ``localized_keys`` holds the overrides found for the language; the base
    object is never modified.
    """

    def __init__(
        self,
        obj: LocalizableObject,
        language: Union[str, Asset],
        localized_keys: Optional[Mapping[str, Any]] = None,
    ):
        self._object = obj
        self._language = _language_id(language)
        self.localized_keys: Dict[str, Any] = dict(localized_keys or {})

    def is_localized(self) -> bool:
        return len(self.localized_keys) > 0

    def get_language(self) -> str:
        return self._language

    def get_base(self) -> LocalizableObject:
        return self._object

    def get_object(self) -> LocalizableObject:
        """The base object with this language's overrides applied."""
        return _apply_overrides(self._object, self.localized_keys)

    def with_translations(self, translations: Mapping[str, Any]) -> "LocalizedObject":
        """A new overlay holding ``translations``; blank values are dropped."""
        kept = {k: v for k, v in translations.items() if v not in (None, "", [], ())}
        return LocalizedObject(self._object, self._language, kept)

    def to_update(self) -> "LocalizationUpdate":
        return LocalizationUpdate(
            uuid=_object_uuid(self._object),
            translations=dict(self.localized_keys) or None,
        )

    def __repr__(self) -> str:
        return f"LocalizedObject(language={self._language!r}, keys={sorted(self.localized_keys)})"


@dataclass
class LocalizationUpdate:
    """New translations for one object; None clears them."""

    uuid: str
    translations: Optional[Dict[str, Any]] = None


def get_localization(
    obj: LocalizableObject,
    localization: Optional[LocalizationMap],
    language: Union[str, Asset],
) -> LocalizedObject:
    """Resolve the overlay for ``obj`` in ``language``; absent buckets give an empty overlay."""
    language_id = _language_id(language)
    uuid = _object_uuid(obj)
    bucket = ((localization or {}).get(language_id) or {}).get(uuid) if uuid else None
    return LocalizedObject(obj, language_id, bucket)


def get_localizable_keys(obj: LocalizableObject) -> Tuple[str, ...]:
    if isinstance(obj, Action):
        return LOCALIZABLE_KEYS.get(obj.type, ())
    if isinstance(obj, Case):
        return CASE_LOCALIZABLE_KEYS
    if isinstance(obj, Exit):
        return EXIT_LOCALIZABLE_KEYS
    return ()


def get_base_value(obj: LocalizableObject, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    if isinstance(obj, Action):
        return obj.params.get(key)
    return getattr(obj, key, None)


def get_translatable_keys(obj: LocalizableObject) -> Tuple[str, ...]:
    """Localizable keys with something in the base object to translate."""
    return tuple(
        key for key in get_localizable_keys(obj) if get_base_value(obj, key) not in (None, "", [], ())
    )


def missing_localized_keys(
    localizable_keys: Sequence[str],
    localized: LocalizedObject,
) -> List[str]:
    """Declared-localizable keys that have no translation in the overlay."""
    if not localized.is_localized():
        return list(localizable_keys)
    return [key for key in localizable_keys if key not in localized.localized_keys]


def has_missing_localization(
    obj: LocalizableObject,
    localization: Optional[LocalizationMap],
    language: Union[str, Asset],
) -> bool:
    keys = get_translatable_keys(obj)
    if not keys:
        return False
    return len(missing_localized_keys(keys, get_localization(obj, localization, language))) > 0


def update_localizations(
    localization: Optional[LocalizationMap],
    language: Union[str, Asset],
    updates: Sequence[LocalizationUpdate],
) -> LocalizationMap:
    """Return a new localization map with ``updates`` applied to ``language``."""
    language_id = _language_id(language)
    updated: LocalizationMap = {
        lang: dict(buckets) for lang, buckets in (localization or {}).items()
    }
    buckets = updated.setdefault(language_id, {})

    for update in updates:
        if update.translations:
            buckets[update.uuid] = dict(update.translations)
        else:
            buckets.pop(update.uuid, None)

    logger.debug(f"Applied {len(updates)} localization updates for '{language_id}'")
    return updated
