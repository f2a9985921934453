"""
Split by Random form.
"""

from typing import Any, List, Optional

from ..config import EditorType, get_settings
from ..forms.base import NodeEditorSettings, RouterForm
from ..forms.state import FormEntry, FormState, ValidationFailure
from ..forms.validators import validate
from ..models import RandomRouter, RenderNode
from .exits import create_render_node, resolve_named_exits
from .helpers import get_result_name

DEFAULT_BUCKETS = ["Bucket 1", "Bucket 2"]


def validate_buckets(name: str, value: Any) -> Optional[ValidationFailure]:
    names = [b.strip().lower() for b in value or [] if b.strip()]
    limit = get_settings().editor.max_random_buckets
    if len(names) < 2:
        return ValidationFailure(f"{name} need at least two entries")
    if len(names) > limit:
        return ValidationFailure(f"{name} cannot have more than {limit} entries")
    if len(set(names)) != len(names):
        return ValidationFailure(f"{name} must have unique names")
    return None


def node_to_state(settings: NodeEditorSettings) -> FormState:
    original = settings.original_node
    buckets = list(DEFAULT_BUCKETS)
    if original.ui.type == EditorType.SPLIT_BY_RANDOM and isinstance(original.node.router, RandomRouter):
        buckets = [e.name or "" for e in original.node.exits]

    return FormState(
        buckets=FormEntry(buckets),
        result_name=FormEntry(get_result_name(settings, EditorType.SPLIT_BY_RANDOM)),
        valid=True,
    )


def state_to_node(settings: NodeEditorSettings, state: FormState) -> RenderNode:
    original = settings.original_node.node
    router = RandomRouter(result_name=state.result_name.value or None)
    return create_render_node(
        original.uuid,
        router,
        resolve_named_exits(state.buckets.value, original.exits),
        EditorType.SPLIT_BY_RANDOM,
    )


class RandomRouterForm(RouterForm):
    """Splits contacts evenly across named buckets."""

    editor_type = EditorType.SPLIT_BY_RANDOM
    node_to_state = staticmethod(node_to_state)
    state_to_node = staticmethod(state_to_node)

    def handle_buckets_changed(self, buckets: List[str]) -> bool:
        return self.update({"buckets": validate("Buckets", buckets, [validate_buckets])})

    def handle_result_name_changed(self, result_name: str) -> bool:
        return self.update({"result_name": FormEntry(result_name)})

    def validate_all(self) -> bool:
        return self.handle_buckets_changed(self.state.buckets.value)
