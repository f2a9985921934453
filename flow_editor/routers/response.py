"""
Wait for Response form.
"""

from typing import List, Optional

from ..config import EditorType, WaitType, get_settings
from ..forms.base import NodeEditorSettings, RouterForm
from ..forms.state import FormEntry, FormState
from ..forms.validators import validate
from ..models import RenderNode, SwitchRouter, Wait
from .exits import CaseProps, create_render_node, resolve_exits
from .helpers import (
    get_default_exit_uuid,
    get_initial_cases,
    get_result_name,
    validate_case_names,
)


def node_to_state(settings: NodeEditorSettings) -> FormState:
    original = settings.original_node
    timeout = None
    if original.ui.type == EditorType.WAIT_FOR_RESPONSE and original.node.wait is not None:
        timeout = original.node.wait.timeout

    return FormState(
        cases=FormEntry(get_initial_cases(settings, EditorType.WAIT_FOR_RESPONSE)),
        result_name=FormEntry(get_result_name(settings, EditorType.WAIT_FOR_RESPONSE)),
        timeout=FormEntry(timeout),
        valid=True,
    )


def state_to_node(settings: NodeEditorSettings, state: FormState) -> RenderNode:
    original = settings.original_node.node
    resolved = resolve_exits(
        state.cases.value,
        True,
        original.exits,
        default_exit_uuid=get_default_exit_uuid(original),
    )

    router = SwitchRouter(
        operand=get_settings().editor.default_operand,
        cases=resolved.cases,
        default_exit_uuid=resolved.default_exit,
        result_name=state.result_name.value or None,
    )

    return create_render_node(
        original.uuid,
        router,
        resolved.exits,
        EditorType.WAIT_FOR_RESPONSE,
        wait=Wait(type=WaitType.MSG, timeout=state.timeout.value),
    )


class ResponseRouterForm(RouterForm):
    """Waits for the contact's reply and routes on it."""

    editor_type = EditorType.WAIT_FOR_RESPONSE
    node_to_state = staticmethod(node_to_state)
    state_to_node = staticmethod(state_to_node)

    def handle_cases_updated(self, cases: List[CaseProps]) -> bool:
        return self.update({"cases": validate("Rules", cases, [validate_case_names])})

    def handle_result_name_changed(self, result_name: str) -> bool:
        return self.update({"result_name": FormEntry(result_name)})

    def handle_timeout_changed(self, timeout: Optional[int]) -> bool:
        return self.update({"timeout": FormEntry(timeout or None)})

    def validate_all(self) -> bool:
        return self.update({"cases": validate("Rules", self.state.cases.value, [validate_case_names])})
