"""
Translation form.

Edits the localizable keys of one object in one language. Saving produces a
LocalizationUpdate; keys left blank fall back to the base object.
"""

from typing import Any, List, Optional, Sequence

from ..localization import (
    LocalizationUpdate,
    LocalizedObject,
    get_base_value,
    get_localizable_keys,
    get_translatable_keys,
    missing_localized_keys,
)
from .base import FormSession
from .state import FormEntry, FormState


class TranslationForm(FormSession[LocalizationUpdate]):
    """Translations for one object in one language."""

    def __init__(self, localized: LocalizedObject, keys: Optional[Sequence[str]] = None):
        self.localized = localized
        self.keys = tuple(keys) if keys is not None else get_localizable_keys(localized.get_base())

        fields = {}
        for key in self.keys:
            base_value = get_base_value(localized.get_base(), key)
            empty: Any = [] if isinstance(base_value, (list, tuple)) else ""
            fields[key] = FormEntry(localized.localized_keys.get(key, empty))
        super().__init__(FormState(fields, valid=True))

    def get_base_value(self, key: str) -> Any:
        """What the translator is translating from."""
        return get_base_value(self.localized.get_base(), key)

    def handle_translation_changed(self, key: str, value: Any) -> bool:
        if key not in self.keys:
            raise KeyError(f"'{key}' is not localizable here")
        return self.update({key: FormEntry(value)})

    def missing_keys(self) -> List[str]:
        """Keys with base text that still lack a translation."""
        translatable = [key for key in self.keys if key in get_translatable_keys(self.localized.get_base())]
        return missing_localized_keys(translatable, self.localized.with_translations(self._translations()))

    def _translations(self):
        return {key: self.state[key].value for key in self.keys}

    def to_fragment(self) -> LocalizationUpdate:
        return self.localized.with_translations(self._translations()).to_update()

