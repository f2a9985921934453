"""
Exit Resolution.

Router forms associate cases with exits by name. Resolution turns those
names back into exits, reusing the node's existing exits (and therefore their
downstream connections) wherever a name survives the edit.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..config import EditorType, Operator, get_settings
from ..models import (
    Action,
    Case,
    Exit,
    Node,
    RenderNode,
    Router,
    SwitchRouter,
    UINode,
    Wait,
    create_uuid,
)

logger = logging.getLogger(__name__)


@dataclass
class CaseProps:
    """A case as edited in a form, pointing at its exit by name."""

    type: Operator
    arguments: List[str] = field(default_factory=list)
    exit_name: Optional[str] = None
    uuid: Optional[str] = None
    exit_uuid: Optional[str] = None  # exit the case pointed at before the edit

    @classmethod
    def from_case(cls, case: Case, exit_name: Optional[str]) -> "CaseProps":
        return cls(
            type=case.type,
            arguments=list(case.arguments),
            exit_name=exit_name,
            uuid=case.uuid,
            exit_uuid=case.exit_uuid,
        )


@dataclass
class ResolvedExits:
    """Cases rewritten onto a deduplicated exit list."""

    cases: List[Case]
    exits: List[Exit]
    default_exit: Optional[str]


def _normalize(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def _find_by_name(exits: Sequence[Exit], name: str) -> Optional[Exit]:
    wanted = _normalize(name)
    return next((e for e in exits if e.name and _normalize(e.name) == wanted), None)


def _claim(
    name: str,
    current_exits: Sequence[Exit],
    claimed: Dict[str, Exit],
    fallback: Optional[Exit] = None,
) -> Exit:
    """Reuse the current exit called ``name`` (or ``fallback``), else mint one."""
    existing = _find_by_name(current_exits, name)
    if existing is None or existing.uuid in claimed:
        existing = fallback if fallback is not None and fallback.uuid not in claimed else None

    if existing is not None:
        return Exit(uuid=existing.uuid, name=name, destination_node_uuid=existing.destination_node_uuid)
    return Exit(uuid=create_uuid(), name=name)


def resolve_exits(
    cases: Sequence[CaseProps],
    include_non_match: bool,
    current_exits: Sequence[Exit],
    default_exit_uuid: Optional[str] = None,
    non_match_name: Optional[str] = None,
) -> ResolvedExits:
    """
    Reconcile router cases against a node's current exits.

    Args:
        cases: Cases in display order, each naming its exit
        include_non_match: Add a catch-all exit and make it the default
        current_exits: The node's exits before the edit
        default_exit_uuid: The router's current default exit, if any
        non_match_name: Name for the catch-all exit; defaults to "Other",
            or "All Responses" when no case produced an exit

    Returns:
        ResolvedExits whose exits are unique by name, ordered by first
        appearance among the cases with the catch-all last. Without
        ``include_non_match`` the default is the current default exit when
        it still has an exit (kept last when no case names it), otherwise None.
    """
    editor = get_settings().editor
    previous = {e.uuid: e for e in current_exits}
    exits: List[Exit] = []
    claimed: Dict[str, Exit] = {}
    resolved: List[Case] = []

    for props in cases:
        name = props.exit_name
        if not _normalize(name) and props.exit_uuid in previous:
            name = previous[props.exit_uuid].name

        if not _normalize(name):
            logger.warning(f"Dropping case {props.uuid or props.type.value} without an exit name")
            continue
        name = name.strip()

        node_exit = _find_by_name(exits, name)
        if node_exit is None:
            node_exit = _claim(name, current_exits, claimed)
            if node_exit.uuid not in previous and props.exit_uuid in previous:
                # a renamed exit keeps its connection
                node_exit.destination_node_uuid = previous[props.exit_uuid].destination_node_uuid
            exits.append(node_exit)
            claimed[node_exit.uuid] = node_exit

        resolved.append(
            Case(
                uuid=props.uuid or create_uuid(),
                type=props.type,
                arguments=list(props.arguments),
                exit_uuid=node_exit.uuid,
            )
        )

    if include_non_match:
        if non_match_name is None:
            non_match_name = editor.other_exit_name if exits else editor.all_responses_exit_name

        default = _find_by_name(exits, non_match_name)
        if default is None:
            default = _claim(non_match_name, current_exits, claimed, previous.get(default_exit_uuid))
            exits.append(default)
            claimed[default.uuid] = default
        default_uuid = default.uuid
    elif default_exit_uuid in claimed:
        default_uuid = default_exit_uuid
    elif default_exit_uuid in previous:
        default = previous[default_exit_uuid]
        exits.append(Exit(uuid=default.uuid, name=default.name, destination_node_uuid=default.destination_node_uuid))
        claimed[default.uuid] = exits[-1]
        default_uuid = default.uuid
    else:
        default_uuid = None

    dropped = [e.uuid for e in current_exits if e.uuid not in claimed]
    if dropped:
        logger.debug(f"Dropped {len(dropped)} unreferenced exits: {dropped}")

    return ResolvedExits(cases=resolved, exits=exits, default_exit=default_uuid)


def resolve_named_exits(names: Sequence[str], current_exits: Sequence[Exit]) -> List[Exit]:
    """Exits for a list of names (random buckets), reusing current exits by name."""
    exits: List[Exit] = []
    claimed: Dict[str, Exit] = {}
    for name in names:
        if not _normalize(name) or _find_by_name(exits, name):
            continue
        node_exit = _claim(name.strip(), current_exits, claimed)
        exits.append(node_exit)
        claimed[node_exit.uuid] = node_exit
    return exits


def create_case_props(cases: Sequence[Case], exits: Sequence[Exit]) -> List[CaseProps]:
    """Turn a router's cases back into name-addressed form cases."""
    names = {e.uuid: e.name for e in exits}
    return [CaseProps.from_case(case, names.get(case.exit_uuid)) for case in cases]


def has_cases(node: Node) -> bool:
    return isinstance(node.router, SwitchRouter) and len(node.router.cases) > 0


def create_render_node(
    uuid: str,
    router: Optional[Router],
    exits: List[Exit],
    editor_type: Optional[EditorType],
    actions: Optional[List[Action]] = None,
    wait: Optional[Wait] = None,
) -> RenderNode:
    """Build the fragment a router form hands back on save."""
    return RenderNode(
        ui=UINode(type=editor_type),
        node=Node(uuid=uuid, actions=list(actions or []), exits=exits, router=router, wait=wait),
    )
