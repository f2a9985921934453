"""
Send Broadcast form.
"""

from typing import List

from ..config import ActionType, AssetType
from ..forms.base import ActionForm, NodeEditorSettings, get_action_uuid, original_action_of
from ..forms.state import FormEntry, FormState
from ..forms.validators import validate, validate_required
from ..models import Action, Asset
from .helpers import assets_to_refs, get_recipients


def initialize_form(settings: NodeEditorSettings) -> FormState:
    action = original_action_of(settings, ActionType.SEND_BROADCAST)
    if action is not None:
        return FormState(
            recipients=FormEntry(get_recipients(action)),
            text=FormEntry(action.get("text", "")),
            valid=True,
        )

    return FormState(recipients=FormEntry([]), text=FormEntry(""), valid=False)


def state_to_action(settings: NodeEditorSettings, state: FormState) -> Action:
    recipients = state.recipients.value
    return Action(
        uuid=get_action_uuid(settings, ActionType.SEND_BROADCAST),
        type=ActionType.SEND_BROADCAST,
        params={
            "text": state.text.value,
            "groups": assets_to_refs(recipients, AssetType.GROUP),
            "contacts": assets_to_refs(recipients, AssetType.CONTACT),
        },
    )


class SendBroadcastForm(ActionForm):
    """Message sent to groups and contacts other than the current one."""

    action_type = ActionType.SEND_BROADCAST
    initialize_form = staticmethod(initialize_form)
    state_to_action = staticmethod(state_to_action)

    def handle_recipients_changed(self, recipients: List[Asset]) -> bool:
        return self.update({"recipients": validate("Recipients", recipients, [validate_required])})

    def handle_text_changed(self, text: str) -> bool:
        return self.update({"text": validate("Message", text, [validate_required])})

    def validate_all(self) -> bool:
        return self.update({
            "recipients": validate("Recipients", self.state.recipients.value, [validate_required]),
            "text": validate("Message", self.state.text.value, [validate_required]),
        })
