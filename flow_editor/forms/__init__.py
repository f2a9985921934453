"""
Node Editor Forms.

Form state, merging, validation and the base form sessions.
"""

from .base import ActionForm, FormSession, NodeEditorSettings, RouterForm
from .state import (
    FormEntry,
    FormState,
    Raw,
    RemoveItems,
    ValidationFailure,
    Wrapped,
    merge_form,
)
from .translation import TranslationForm

__all__ = [
    "ActionForm",
    "FormSession",
    "NodeEditorSettings",
    "RouterForm",
    "FormEntry",
    "FormState",
    "Raw",
    "RemoveItems",
    "ValidationFailure",
    "Wrapped",
    "merge_form",
    "TranslationForm",
]
