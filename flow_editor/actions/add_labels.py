"""
Add Labels form.
"""

from typing import List

from ..config import ActionType, AssetType
from ..forms.base import ActionForm, NodeEditorSettings, get_action_uuid, original_action_of
from ..forms.state import FormEntry, FormState
from ..forms.validators import validate, validate_required
from ..models import Action, Asset
from .helpers import assets_to_refs, refs_to_assets


def initialize_form(settings: NodeEditorSettings) -> FormState:
    action = original_action_of(settings, ActionType.ADD_INPUT_LABELS)
    if action is not None:
        return FormState(
            labels=FormEntry(refs_to_assets(action.get("labels") or [], AssetType.LABEL)),
            valid=True,
        )

    return FormState(labels=FormEntry([]), valid=False)


def state_to_action(settings: NodeEditorSettings, state: FormState) -> Action:
    return Action(
        uuid=get_action_uuid(settings, ActionType.ADD_INPUT_LABELS),
        type=ActionType.ADD_INPUT_LABELS,
        params={"labels": assets_to_refs(state.labels.value, AssetType.LABEL)},
    )


class AddLabelsForm(ActionForm):
    """Labels to apply to the last input."""

    action_type = ActionType.ADD_INPUT_LABELS
    initialize_form = staticmethod(initialize_form)
    state_to_action = staticmethod(state_to_action)

    def handle_labels_changed(self, selected: List[Asset]) -> bool:
        return self.update({"labels": validate("Labels", selected, [validate_required])})

    def validate_all(self) -> bool:
        return self.handle_labels_changed(self.state.labels.value)
