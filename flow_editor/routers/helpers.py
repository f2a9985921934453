"""
Shared helpers for router forms.
"""

from typing import Any, List, Optional

from ..config import EditorType
from ..forms.base import NodeEditorSettings
from ..forms.state import ValidationFailure
from ..models import Node, SwitchRouter
from .exits import CaseProps, create_case_props, has_cases


def get_default_exit_uuid(node: Node) -> Optional[str]:
    if isinstance(node.router, SwitchRouter):
        return node.router.default_exit_uuid
    return None


def get_initial_cases(settings: NodeEditorSettings, editor_type: EditorType) -> List[CaseProps]:
    original = settings.original_node
    if original.ui.type == editor_type and has_cases(original.node):
        return create_case_props(original.node.router.cases, original.node.exits)
    return []


def get_result_name(settings: NodeEditorSettings, editor_type: EditorType) -> str:
    original = settings.original_node
    if original.ui.type == editor_type and original.node.router is not None:
        return original.node.router.result_name or ""
    return ""


def validate_case_names(name: str, value: Any) -> Optional[ValidationFailure]:
    """Cases with arguments must name the category they route to."""
    for case in value or []:
        if case.arguments and not (case.exit_name or "").strip():
            return ValidationFailure(f"{name} need a category name for every rule")
    return None
