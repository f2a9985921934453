"""
Form Registry.

Maps every action kind and every router editor type to the form that edits
it. The registry refuses to build unless both maps are complete, so a new
kind can't be added without a form.
"""

import logging
from functools import lru_cache
from typing import Dict, List, Type, Union

from .actions.add_labels import AddLabelsForm
from .actions.send_broadcast import SendBroadcastForm
from .actions.send_email import SendEmailForm
from .actions.send_msg import SendMsgForm
from .actions.set_run_result import SetRunResultForm
from .actions.update_contact import UpdateContactForm
from .config import ActionType, CONTACT_ACTION_TYPES, EditorType
from .forms.base import ActionForm, NodeEditorSettings, RouterForm
from .models import FlowEditorError
from .routers.expression import ExpressionRouterForm
from .routers.random import RandomRouterForm
from .routers.response import ResponseRouterForm
from .routers.webhook import WebhookRouterForm

logger = logging.getLogger(__name__)

ACTION_FORMS: List[Type[ActionForm]] = [
    SendMsgForm,
    SendBroadcastForm,
    SendEmailForm,
    AddLabelsForm,
    SetRunResultForm,
]

ROUTER_FORMS: List[Type[RouterForm]] = [
    ExpressionRouterForm,
    ResponseRouterForm,
    WebhookRouterForm,
    RandomRouterForm,
]

EditorForm = Union[ActionForm, RouterForm]


class FormRegistry:
    """
    Lookup of editor forms by action kind and router editor type.

    Webhook calls are actions, but their form edits the whole node, so
    CALL_WEBHOOK resolves to the webhook router form.
    """

    def __init__(self):
        self._action_forms: Dict[ActionType, type] = {}
        self._router_forms: Dict[EditorType, Type[RouterForm]] = {}

        for form_cls in ACTION_FORMS:
            self.register_action(form_cls.action_type, form_cls)
        for action_type in CONTACT_ACTION_TYPES:
            self.register_action(action_type, UpdateContactForm)
        for form_cls in ROUTER_FORMS:
            self.register_router(form_cls.editor_type, form_cls)
        self.register_action(ActionType.CALL_WEBHOOK, WebhookRouterForm)

        missing = [t.value for t in ActionType if t not in self._action_forms]
        missing += [t.value for t in EditorType if t not in self._router_forms]
        if missing:
            raise FlowEditorError(f"No editor form registered for: {', '.join(missing)}")

        logger.info(
            f"Registered {len(self._action_forms)} action forms and "
            f"{len(self._router_forms)} router forms"
        )

    def register_action(self, action_type: ActionType, form_cls: type) -> None:
        if action_type in self._action_forms:
            logger.warning(f"Overwriting existing action form: {action_type.value}")
        self._action_forms[action_type] = form_cls

    def register_router(self, editor_type: EditorType, form_cls: Type[RouterForm]) -> None:
        if editor_type in self._router_forms:
            logger.warning(f"Overwriting existing router form: {editor_type.value}")
        self._router_forms[editor_type] = form_cls

    def get_action_form(self, action_type: ActionType) -> type:
        return self._action_forms[ActionType(action_type)]

    def get_router_form(self, editor_type: EditorType) -> Type[RouterForm]:
        return self._router_forms[EditorType(editor_type)]

    def open_editor(self, settings: NodeEditorSettings) -> EditorForm:
        """
        Open the form for what the editor was launched on.

        An action opens its kind's form, a router node opens its editor
        type's form, and anything else starts a new message.
        """
        if settings.original_action is not None:
            form_cls = self.get_action_form(settings.original_action.type)
        elif settings.original_node.ui.type is not None:
            form_cls = self.get_router_form(settings.original_node.ui.type)
        else:
            form_cls = SendMsgForm

        logger.debug(f"Opening {form_cls.__name__} for node {settings.original_node.node.uuid}")
        return form_cls(settings)


@lru_cache
def get_registry() -> FormRegistry:
    """Get the shared form registry."""
    return FormRegistry()


def get_action_form(action_type: ActionType) -> type:
    return get_registry().get_action_form(action_type)


def get_router_form(editor_type: EditorType) -> Type[RouterForm]:
    return get_registry().get_router_form(editor_type)


def open_editor(settings: NodeEditorSettings) -> EditorForm:
    return get_registry().open_editor(settings)
