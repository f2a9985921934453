"""
Send Email form.
"""

from typing import List

from ..config import ActionType
from ..forms.base import ActionForm, NodeEditorSettings, get_action_uuid, original_action_of
from ..forms.state import FormEntry, FormState
from ..forms.validators import validate, validate_email, validate_required
from ..models import Action


def initialize_form(settings: NodeEditorSettings) -> FormState:
    action = original_action_of(settings, ActionType.SEND_EMAIL)
    if action is not None:
        return FormState(
            recipients=FormEntry(list(action.get("addresses") or [])),
            subject=FormEntry(action.get("subject", "")),
            body=FormEntry(action.get("body", "")),
            valid=True,
        )

    return FormState(
        recipients=FormEntry([]),
        subject=FormEntry(""),
        body=FormEntry(""),
        valid=False,
    )


def state_to_action(settings: NodeEditorSettings, state: FormState) -> Action:
    return Action(
        uuid=get_action_uuid(settings, ActionType.SEND_EMAIL),
        type=ActionType.SEND_EMAIL,
        params={
            "addresses": list(state.recipients.value),
            "subject": state.subject.value,
            "body": state.body.value,
        },
    )


class SendEmailForm(ActionForm):
    """Recipients, subject and body of an email."""

    action_type = ActionType.SEND_EMAIL
    initialize_form = staticmethod(initialize_form)
    state_to_action = staticmethod(state_to_action)

    def handle_recipients_changed(self, recipients: List[str]) -> bool:
        return self._handle_update(recipients=recipients)

    def handle_subject_changed(self, subject: str) -> bool:
        return self._handle_update(subject=subject)

    def handle_body_changed(self, body: str) -> bool:
        return self._handle_update(body=body)

    def _handle_update(self, **keys) -> bool:
        updates = {}
        if "recipients" in keys:
            updates["recipients"] = validate(
                "Recipients", keys["recipients"], [validate_required, validate_email]
            )
        if "subject" in keys:
            updates["subject"] = validate("Subject", keys["subject"], [validate_required])
        if "body" in keys:
            updates["body"] = validate("Body", keys["body"], [validate_required])
        return self.update(updates)

    def validate_all(self) -> bool:
        # validate in case they never touched an empty field
        return self._handle_update(
            recipients=self.state.recipients.value,
            subject=self.state.subject.value,
            body=self.state.body.value,
        )
