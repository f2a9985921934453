"""
Set Run Result form.
"""

from ..config import ActionType, get_settings
from ..forms.base import ActionForm, NodeEditorSettings, get_action_uuid, original_action_of
from ..forms.state import FormEntry, FormState
from ..forms.validators import validate, validate_max_length, validate_required
from ..models import Action


def initialize_form(settings: NodeEditorSettings) -> FormState:
    action = original_action_of(settings, ActionType.SET_RUN_RESULT)
    if action is not None:
        return FormState(
            name=FormEntry(action.get("name", "")),
            value=FormEntry(action.get("value", "")),
            category=FormEntry(action.get("category", "")),
            valid=True,
        )

    return FormState(
        name=FormEntry(""),
        value=FormEntry(""),
        category=FormEntry(""),
        valid=False,
    )


def state_to_action(settings: NodeEditorSettings, state: FormState) -> Action:
    return Action(
        uuid=get_action_uuid(settings, ActionType.SET_RUN_RESULT),
        type=ActionType.SET_RUN_RESULT,
        params={
            "name": state.name.value,
            "value": state.value.value,
            "category": state.category.value,
        },
    )


class SetRunResultForm(ActionForm):
    """Saves a named value (and optional category) on the run."""

    action_type = ActionType.SET_RUN_RESULT
    initialize_form = staticmethod(initialize_form)
    state_to_action = staticmethod(state_to_action)

    def handle_name_changed(self, name: str) -> bool:
        limit = get_settings().editor.max_result_name_length
        return self.update({"name": validate("Name", name, [validate_required, validate_max_length(limit)])})

    def handle_value_changed(self, value: str) -> bool:
        return self.update({"value": FormEntry(value)})

    def handle_category_changed(self, category: str) -> bool:
        return self.update({"category": FormEntry(category)})

    def validate_all(self) -> bool:
        return self.handle_name_changed(self.state.name.value)
