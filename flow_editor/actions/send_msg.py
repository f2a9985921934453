"""
Send Message form.
"""

from typing import List

from ..config import ActionType
from ..forms.base import ActionForm, NodeEditorSettings, get_action_uuid, original_action_of
from ..forms.state import FormEntry, FormState
from ..forms.validators import validate, validate_max_length, validate_required
from ..models import Action

MAX_TEXT_LENGTH = 640


def initialize_form(settings: NodeEditorSettings) -> FormState:
    action = original_action_of(settings, ActionType.SEND_MSG)
    if action is not None:
        return FormState(
            text=FormEntry(action.get("text", "")),
            quick_replies=FormEntry(list(action.get("quick_replies") or [])),
            valid=True,
        )

    return FormState(text=FormEntry(""), quick_replies=FormEntry([]), valid=False)


def state_to_action(settings: NodeEditorSettings, state: FormState) -> Action:
    params = {"text": state.text.value}
    if state.quick_replies.value:
        params["quick_replies"] = list(state.quick_replies.value)

    return Action(
        uuid=get_action_uuid(settings, ActionType.SEND_MSG),
        type=ActionType.SEND_MSG,
        params=params,
    )


class SendMsgForm(ActionForm):
    """Message text with optional quick replies."""

    action_type = ActionType.SEND_MSG
    initialize_form = staticmethod(initialize_form)
    state_to_action = staticmethod(state_to_action)

    def handle_text_changed(self, text: str) -> bool:
        return self.update({
            "text": validate("Message", text, [validate_required, validate_max_length(MAX_TEXT_LENGTH)])
        })

    def handle_quick_replies_changed(self, quick_replies: List[str]) -> bool:
        return self.update({"quick_replies": FormEntry([q for q in quick_replies if q.strip()])})

    def validate_all(self) -> bool:
        return self.handle_text_changed(self.state.text.value)
