"""
Graph Model.

Owns the render node map and every mutation of it. Each operation builds a
new map and swaps it in whole, so a reader holding a previous map always
sees a complete, consistent graph. Failed operations raise before the swap
and leave the current map in place.
"""

import copy
import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set

from ..models import (
    Action,
    Exit,
    GraphIntegrityError,
    Node,
    NodeNotFoundError,
    RenderNode,
    RenderNodeMap,
    SwitchRouter,
    UINode,
    create_uuid,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================


def _destinations(node: Node) -> Set[str]:
    return {e.destination_node_uuid for e in node.exits if e.destination_node_uuid}


def _with_exits(render_node: RenderNode, exits: List[Exit]) -> RenderNode:
    return replace(render_node, node=replace(render_node.node, exits=exits))


def _inbound_for(nodes: RenderNodeMap, target_uuid: str) -> Dict[str, str]:
    """Inbound index for one node: source uuid -> first exit of that source pointing here."""
    inbound: Dict[str, str] = {}
    for source_uuid, render_node in nodes.items():
        for node_exit in render_node.node.exits:
            if node_exit.destination_node_uuid == target_uuid:
                inbound.setdefault(source_uuid, node_exit.uuid)
    return inbound


def _reindex(nodes: RenderNodeMap, targets: Iterable[str]) -> RenderNodeMap:
    for target_uuid in targets:
        if target_uuid in nodes:
            nodes[target_uuid] = replace(
                nodes[target_uuid],
                inbound_connections=_inbound_for(nodes, target_uuid),
            )
    return nodes


def validate_router(node: Node) -> List[str]:
    """Problems with a node's router referencing exits the node doesn't have."""
    problems: List[str] = []
    router = node.router
    if not isinstance(router, SwitchRouter):
        return problems

    exit_uuids = {e.uuid for e in node.exits}
    if router.default_exit_uuid and router.default_exit_uuid not in exit_uuids:
        problems.append(f"Node {node.uuid} default exit {router.default_exit_uuid} is missing")
    for case in router.cases:
        if case.exit_uuid not in exit_uuids:
            problems.append(f"Node {node.uuid} case {case.uuid} points at missing exit {case.exit_uuid}")
    return problems


def create_action_node(
    action: Action,
    position: Optional[Dict[str, float]] = None,
    ghost: bool = False,
) -> RenderNode:
    """A new node holding a single action and one open exit."""
    return RenderNode(
        ui=UINode(position=dict(position or {"left": 0, "top": 0})),
        node=Node(uuid=create_uuid(), actions=[action], exits=[Exit(uuid=create_uuid())]),
        ghost=ghost,
    )


# =============================================================================
# Graph Model
# =============================================================================


class GraphModel:
    """
    The authoritative node map.

    Operations:
    - get / upsert / remove nodes
    - connect and disconnect exits
    - add, update, remove and reorder actions
    - install and remove routers
    """

    def __init__(self, nodes: Optional[RenderNodeMap] = None):
        """Initialize from an existing map, recomputing every inbound index."""
        initial = {uuid: copy.deepcopy(rn) for uuid, rn in (nodes or {}).items()}
        for render_node in initial.values():
            for destination in _destinations(render_node.node):
                if destination not in initial:
                    raise GraphIntegrityError(
                        f"Node {render_node.node.uuid} exits to unknown node {destination}"
                    )
        self._nodes: RenderNodeMap = _reindex(initial, list(initial))

    @property
    def nodes(self) -> RenderNodeMap:
        """The current snapshot. Never mutated in place."""
        return self._nodes

    def __contains__(self, uuid: object) -> bool:
        return uuid in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get_node(self, uuid: str) -> Optional[RenderNode]:
        """Get a node by uuid."""
        return self._nodes.get(uuid)

    def _require(self, uuid: str) -> RenderNode:
        render_node = self._nodes.get(uuid)
        if render_node is None:
            raise NodeNotFoundError(f"Node not found: {uuid}")
        return render_node

    def _commit(self, nodes: RenderNodeMap) -> RenderNodeMap:
        self._nodes = nodes
        return nodes

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def upsert_node(self, render_node: RenderNode) -> RenderNodeMap:
        """
        Insert or replace a node.

        Inbound connections are recomputed for the node itself and for every
        node its old or new exits point at.

        Raises:
            GraphIntegrityError: an exit points at a node not in the map
        """
        uuid = render_node.node.uuid
        for destination in _destinations(render_node.node):
            if destination != uuid and destination not in self._nodes:
                raise GraphIntegrityError(f"Node {uuid} exits to unknown node {destination}")

        nodes = dict(self._nodes)
        previous = nodes.get(uuid)
        affected = _destinations(previous.node) if previous else set()

        nodes[uuid] = copy.deepcopy(render_node)
        affected |= _destinations(render_node.node) | {uuid}

        logger.info(f"{'Updated' if previous else 'Added'} node {uuid}")
        return self._commit(_reindex(nodes, affected))

    def remove_node(self, uuid: str) -> RenderNodeMap:
        """Remove a node, leaving every exit that pointed at it unterminated."""
        removed = self._require(uuid)
        nodes = dict(self._nodes)
        del nodes[uuid]

        for source_uuid, render_node in nodes.items():
            if uuid in _destinations(render_node.node):
                nodes[source_uuid] = _with_exits(render_node, [
                    replace(e, destination_node_uuid=None) if e.destination_node_uuid == uuid else e
                    for e in render_node.node.exits
                ])

        logger.info(f"Removed node {uuid}")
        return self._commit(_reindex(nodes, _destinations(removed.node) - {uuid}))

    def commit_ghost(self, uuid: str) -> RenderNodeMap:
        """Mark a node created for editing as part of the flow."""
        render_node = self._require(uuid)
        nodes = dict(self._nodes)
        nodes[uuid] = replace(render_node, ghost=False)
        return self._commit(nodes)

    # -------------------------------------------------------------------------
    # Connections
    # -------------------------------------------------------------------------

    def connect(self, source_uuid: str, exit_uuid: str, destination_uuid: str) -> RenderNodeMap:
        """
        Point one of a node's exits at another node.

        Raises:
            NodeNotFoundError: the source node doesn't exist
            GraphIntegrityError: the exit isn't the source's, or the
                destination doesn't exist
        """
        source = self._require(source_uuid)
        node_exit = source.node.get_exit(exit_uuid)
        if node_exit is None:
            raise GraphIntegrityError(f"Exit {exit_uuid} does not belong to node {source_uuid}")
        if destination_uuid not in self._nodes:
            raise GraphIntegrityError(f"Destination node not found: {destination_uuid}")

        return self._route_exit(source, node_exit, destination_uuid)

    def disconnect(self, source_uuid: str, exit_uuid: str) -> RenderNodeMap:
        """Leave one of a node's exits unterminated."""
        source = self._require(source_uuid)
        node_exit = source.node.get_exit(exit_uuid)
        if node_exit is None:
            raise GraphIntegrityError(f"Exit {exit_uuid} does not belong to node {source_uuid}")

        return self._route_exit(source, node_exit, None)

    def _route_exit(self, source: RenderNode, node_exit: Exit, destination_uuid: Optional[str]) -> RenderNodeMap:
        previous = node_exit.destination_node_uuid
        nodes = dict(self._nodes)
        nodes[source.node.uuid] = _with_exits(source, [
            replace(e, destination_node_uuid=destination_uuid) if e.uuid == node_exit.uuid else e
            for e in source.node.exits
        ])

        logger.info(f"Routed exit {node_exit.uuid} of {source.node.uuid}: {previous} -> {destination_uuid}")
        affected = {previous, destination_uuid} - {None}
        return self._commit(_reindex(nodes, affected))

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def update_action(self, node_uuid: str, action: Action) -> RenderNodeMap:
        """Replace the node's action with the same uuid, or append it."""
        render_node = self._require(node_uuid)
        actions = list(render_node.node.actions)
        index = next((i for i, a in enumerate(actions) if a.uuid == action.uuid), -1)
        if index > -1:
            actions[index] = action
        else:
            actions.append(action)

        return self.upsert_node(replace(render_node, node=replace(render_node.node, actions=actions)))

    def remove_action(self, node_uuid: str, action_uuid: str) -> RenderNodeMap:
        """
        Remove an action.

        Removing the last action of a node without a router removes the node.
        """
        render_node = self._require(node_uuid)
        actions = [a for a in render_node.node.actions if a.uuid != action_uuid]
        if len(actions) == len(render_node.node.actions):
            raise GraphIntegrityError(f"Action {action_uuid} not found in node {node_uuid}")

        if not actions and render_node.node.router is None:
            return self.remove_node(node_uuid)

        return self.upsert_node(replace(render_node, node=replace(render_node.node, actions=actions)))

    def move_action_up(self, node_uuid: str, action_uuid: str) -> RenderNodeMap:
        """Swap an action with the one before it."""
        render_node = self._require(node_uuid)
        actions = list(render_node.node.actions)
        index = next((i for i, a in enumerate(actions) if a.uuid == action_uuid), -1)
        if index == -1:
            raise GraphIntegrityError(f"Action {action_uuid} not found in node {node_uuid}")
        if index == 0:
            return self._nodes

        actions[index - 1], actions[index] = actions[index], actions[index - 1]
        return self.upsert_node(replace(render_node, node=replace(render_node.node, actions=actions)))

    # -------------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------------

    def update_router(self, fragment: RenderNode) -> RenderNodeMap:
        """
        Install a router form's fragment.

        The fragment's actions, router, wait and exits replace the node's;
        position and ghost status are kept from the existing node.

        Raises:
            GraphIntegrityError: the router references exits the fragment lacks
        """
        problems = validate_router(fragment.node)
        if problems:
            raise GraphIntegrityError("; ".join(problems))

        existing = self._nodes.get(fragment.node.uuid)
        if existing is not None:
            fragment = replace(
                fragment,
                ui=replace(existing.ui, type=fragment.ui.type),
                ghost=existing.ghost,
            )
        return self.upsert_node(fragment)

    def remove_router(self, node_uuid: str) -> RenderNodeMap:
        """Drop a node's router, keeping its default (or first) exit as the single exit."""
        render_node = self._require(node_uuid)
        node = render_node.node
        if node.router is None:
            return self._nodes

        keep = None
        if isinstance(node.router, SwitchRouter):
            keep = node.get_exit(node.router.default_exit_uuid)
        if keep is None and node.exits:
            keep = node.exits[0]
        node_exit = Exit(
            uuid=keep.uuid if keep else create_uuid(),
            destination_node_uuid=keep.destination_node_uuid if keep else None,
        )

        return self.upsert_node(replace(
            render_node,
            ui=replace(render_node.ui, type=None),
            node=replace(node, router=None, wait=None, exits=[node_exit]),
        ))

    # -------------------------------------------------------------------------
    # Consistency
    # -------------------------------------------------------------------------

    def check_consistency(self) -> List[str]:
        """Every way the map breaks exit/inbound or router/exit agreement."""
        problems: List[str] = []
        for uuid, render_node in self._nodes.items():
            problems.extend(validate_router(render_node.node))

            for node_exit in render_node.node.exits:
                destination = node_exit.destination_node_uuid
                if not destination:
                    continue
                target = self._nodes.get(destination)
                if target is None:
                    problems.append(f"Exit {node_exit.uuid} of {uuid} points at missing node {destination}")
                elif uuid not in target.inbound_connections:
                    problems.append(f"Node {destination} is missing inbound entry for {uuid}")

            for source_uuid, exit_uuid in render_node.inbound_connections.items():
                source = self._nodes.get(source_uuid)
                node_exit = source.node.get_exit(exit_uuid) if source else None
                if node_exit is None or node_exit.destination_node_uuid != uuid:
                    problems.append(f"Node {uuid} has stale inbound entry {source_uuid} -> {exit_uuid}")

        return problems
