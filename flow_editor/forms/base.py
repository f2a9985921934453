"""
Form Sessions.

A form session owns a private FormState while the user edits one action or
router. Nothing reaches the graph until ``save`` returns a fragment, and
``save`` refuses while the form is invalid.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, List, Mapping, Optional, Sequence, TypeVar

from ..config import ActionType, EditorType
from ..localization import LocalizedObject
from ..models import Action, Asset, RenderNode, create_uuid
from .state import FormState, Removal, merge_form

logger = logging.getLogger(__name__)

Fragment = TypeVar("Fragment")


@dataclass
class NodeEditorSettings:
    """What the node editor was opened on."""

    original_node: RenderNode
    original_action: Optional[Action] = None
    show_advanced: bool = False
    localizations: List[LocalizedObject] = field(default_factory=list)
    languages: List[Asset] = field(default_factory=list)


def get_action_uuid(settings: NodeEditorSettings, current_type: ActionType) -> str:
    """Keep the original action's uuid unless the user switched kinds."""
    if settings.original_action is not None and settings.original_action.type == current_type:
        return settings.original_action.uuid
    return create_uuid()


def original_action_of(settings: NodeEditorSettings, *types: ActionType) -> Optional[Action]:
    action = settings.original_action
    if action is not None and action.type in types:
        return action
    return None


class FormSession(Generic[Fragment]):
    """Base edit session: merge updates, then save a fragment."""

    def __init__(self, state: FormState):
        self.state = state

    @property
    def valid(self) -> bool:
        return self.state.valid

    def update(self, updates: Mapping[str, Any], removals: Sequence[Removal] = ()) -> bool:
        """Merge a partial update; returns the new validity."""
        self.state = merge_form(self.state, updates, removals)
        return self.state.valid

    def validate_all(self) -> bool:
        """Re-run validation on fields the user may never have touched."""
        return self.state.valid

    def to_fragment(self) -> Fragment:
        raise NotImplementedError

    def save(self) -> Optional[Fragment]:
        """The finished fragment, or None while the form is invalid."""
        if not self.validate_all():
            logger.info(f"{type(self).__name__} not saved: {sorted(self.state.failures())}")
            return None
        return self.to_fragment()


class ActionForm(FormSession[Action]):
    """Edit session for one action kind."""

    action_type: ClassVar[ActionType]

    def __init__(self, settings: NodeEditorSettings):
        self.settings = settings
        super().__init__(self.initialize_form(settings))

    def initialize_form(self, settings: NodeEditorSettings) -> FormState:
        raise NotImplementedError

    def state_to_action(self, settings: NodeEditorSettings, state: FormState) -> Action:
        raise NotImplementedError

    def to_fragment(self) -> Action:
        return self.state_to_action(self.settings, self.state)


class RouterForm(FormSession[RenderNode]):
    """Edit session for a router-level node."""

    editor_type: ClassVar[EditorType]

    def __init__(self, settings: NodeEditorSettings):
        self.settings = settings
        super().__init__(self.node_to_state(settings))

    def node_to_state(self, settings: NodeEditorSettings) -> FormState:
        raise NotImplementedError

    def state_to_node(self, settings: NodeEditorSettings, state: FormState) -> RenderNode:
        raise NotImplementedError

    def to_fragment(self) -> RenderNode:
        return self.state_to_node(self.settings, self.state)
