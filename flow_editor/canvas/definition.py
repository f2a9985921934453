"""
Flow Definition import and export.

The definition document is the boundary with whatever fetches and persists
flows. Importing validates it and builds the render node map; exporting
rebuilds the document from the current map.
"""

import copy
import json
import logging
from dataclasses import replace
from typing import Any, Mapping, Union

from pydantic import ValidationError

from ..models import (
    DefinitionError,
    FlowDefinition,
    FlowDefinitionSchema,
    GraphIntegrityError,
    Node,
    RenderNode,
    RenderNodeMap,
    UINode,
)
from .graph import GraphModel

logger = logging.getLogger(__name__)


def load_definition(document: Union[str, bytes, Mapping[str, Any]]) -> FlowDefinition:
    """
    Read a flow definition from JSON text or an already decoded dict.

    Raises:
        DefinitionError: the document is not JSON or doesn't match the schema
    """
    try:
        data = json.loads(document) if isinstance(document, (str, bytes)) else dict(document)
    except json.JSONDecodeError as e:
        raise DefinitionError(f"Definition is not valid JSON: {e}") from e

    try:
        FlowDefinitionSchema.model_validate(data)
    except ValidationError as e:
        raise DefinitionError(f"Invalid flow definition: {e}") from e

    definition = FlowDefinition(
        uuid=data["uuid"],
        name=data.get("name", ""),
        language=data.get("language"),
        nodes=[Node.from_dict(n) for n in data.get("nodes") or []],
        localization=copy.deepcopy(data.get("localization") or {}),
        ui=copy.deepcopy(data.get("_ui") or {"nodes": {}}),
    )
    logger.info(f"Loaded flow {definition.uuid} with {len(definition.nodes)} nodes")
    return definition


def create_graph(definition: FlowDefinition) -> GraphModel:
    """
    Build the graph model for a definition.

    Raises:
        DefinitionError: an exit points at a node that isn't in the flow, or
            a node's UI entry is malformed (such as an unknown editor type)
    """
    ui_nodes = definition.ui.get("nodes") or {}
    nodes: RenderNodeMap = {}
    for node in definition.nodes:
        try:
            ui = UINode.from_dict(ui_nodes.get(node.uuid) or {})
        except (AttributeError, TypeError, ValueError) as e:
            raise DefinitionError(f"Invalid UI for node {node.uuid}: {e}") from e
        nodes[node.uuid] = RenderNode(ui=ui, node=node)
    try:
        return GraphModel(nodes)
    except GraphIntegrityError as e:
        raise DefinitionError(str(e)) from e


def build_render_nodes(definition: FlowDefinition) -> RenderNodeMap:
    return create_graph(definition).nodes


def get_current_definition(definition: FlowDefinition, nodes: RenderNodeMap) -> FlowDefinition:
    """
    Rebuild the definition from a node map.

    Ghost nodes are left out and exits pointing at them are unterminated.
    """
    ghosts = {uuid for uuid, rn in nodes.items() if rn.ghost}
    committed = [rn for rn in nodes.values() if not rn.ghost]

    exported = []
    for render_node in committed:
        node = copy.deepcopy(render_node.node)
        for node_exit in node.exits:
            if node_exit.destination_node_uuid in ghosts:
                node_exit.destination_node_uuid = None
        exported.append(node)

    ui = copy.deepcopy(definition.ui)
    ui["nodes"] = {rn.node.uuid: rn.ui.to_dict() for rn in committed}

    return replace(
        definition,
        nodes=exported,
        localization=copy.deepcopy(definition.localization),
        ui=ui,
    )


def dump_definition(definition: FlowDefinition, indent: int = 2) -> str:
    return json.dumps(definition.to_dict(), indent=indent)
