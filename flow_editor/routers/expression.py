"""
Split by Expression form.
"""

from typing import List

from ..config import EditorType, get_settings
from ..forms.base import NodeEditorSettings, RouterForm
from ..forms.state import FormEntry, FormState
from ..forms.validators import validate, validate_required
from ..models import RenderNode, SwitchRouter
from .exits import CaseProps, create_render_node, resolve_exits
from .helpers import (
    get_default_exit_uuid,
    get_initial_cases,
    get_result_name,
    validate_case_names,
)


def node_to_state(settings: NodeEditorSettings) -> FormState:
    operand = get_settings().editor.default_operand
    original = settings.original_node
    if original.ui.type == EditorType.SPLIT_BY_EXPRESSION and isinstance(original.node.router, SwitchRouter):
        operand = original.node.router.operand

    return FormState(
        cases=FormEntry(get_initial_cases(settings, EditorType.SPLIT_BY_EXPRESSION)),
        result_name=FormEntry(get_result_name(settings, EditorType.SPLIT_BY_EXPRESSION)),
        operand=FormEntry(operand),
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
        operand=state.operand.value,
        cases=resolved.cases,
        default_exit_uuid=resolved.default_exit,
        result_name=state.result_name.value or None,
    )

    return create_render_node(
        original.uuid,
        router,
        resolved.exits,
        EditorType.SPLIT_BY_EXPRESSION,
    )


class ExpressionRouterForm(RouterForm):
    """Routes on an arbitrary expression."""

    editor_type = EditorType.SPLIT_BY_EXPRESSION
    node_to_state = staticmethod(node_to_state)
    state_to_node = staticmethod(state_to_node)

    def handle_cases_updated(self, cases: List[CaseProps]) -> bool:
        return self.update({"cases": validate("Rules", cases, [validate_case_names])})

    def handle_operand_changed(self, operand: str) -> bool:
        return self.update({"operand": validate("Expression", operand, [validate_required])})

    def handle_result_name_changed(self, result_name: str) -> bool:
        return self.update({"result_name": FormEntry(result_name)})

    def validate_all(self) -> bool:
        return self.update({
            "cases": validate("Rules", self.state.cases.value, [validate_case_names]),
            "operand": validate("Expression", self.state.operand.value, [validate_required]),
        })
