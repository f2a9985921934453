"""Shared pytest fixtures for testing."""

import copy
from typing import Dict, List, Optional, Sequence

import pytest

from flow_editor.canvas.graph import GraphModel
from flow_editor.config import ActionType, get_settings
from flow_editor.forms.base import NodeEditorSettings
from flow_editor.models import Action, Exit, Node, RenderNode, UINode


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Node Fixtures
# =============================================================================


def make_node(
    uuid: str,
    destinations: Sequence[Optional[str]] = (None,),
    actions: Optional[List[Action]] = None,
    left: float = 0,
    top: float = 0,
) -> RenderNode:
    """A message node with one exit per destination, exit uuids ``<node>-e<n>``."""
    if actions is None:
        actions = [Action(uuid=f"{uuid}-a0", type=ActionType.SEND_MSG, params={"text": f"Hi from {uuid}"})]
    return RenderNode(
        ui=UINode(position={"left": left, "top": top}),
        node=Node(
            uuid=uuid,
            actions=actions,
            exits=[
                Exit(uuid=f"{uuid}-e{i}", destination_node_uuid=destination)
                for i, destination in enumerate(destinations)
            ],
        ),
    )


@pytest.fixture
def node_factory():
    """Build message nodes."""
    return make_node


@pytest.fixture
def chain_nodes() -> Dict[str, RenderNode]:
    """n1 -> n2 -> n3, with n1 also branching to n3."""
    return {
        "n1": make_node("n1", ["n2", "n3"]),
        "n2": make_node("n2", ["n3"], top=200),
        "n3": make_node("n3", [None], top=400),
    }


@pytest.fixture
def graph(chain_nodes) -> GraphModel:
    """Graph over the chain nodes."""
    return GraphModel(chain_nodes)


@pytest.fixture
def settings_for():
    """Node editor settings for a node (and optionally one of its actions)."""
    def _settings(render_node: RenderNode, action: Optional[Action] = None) -> NodeEditorSettings:
        return NodeEditorSettings(original_node=render_node, original_action=action)
    return _settings


# =============================================================================
# Definition Fixtures
# =============================================================================


SAMPLE_DEFINITION = {
    "uuid": "flow-1",
    "name": "Favorite Color",
    "language": "eng",
    "nodes": [
        {
            "uuid": "node-ask",
            "actions": [
                {
                    "uuid": "act-ask",
                    "type": "send_msg",
                    "text": "What is your favorite color?",
                    "quick_replies": ["Red", "Green"],
                    "attachments": ["image:https://example.com/colors.png"],
                }
            ],
            "exits": [
                {"uuid": "exit-ask", "name": None, "destination_node_uuid": "node-wait"}
            ],
        },
        {
            "uuid": "node-wait",
            "actions": [],
            "router": {
                "type": "switch",
                "result_name": "Color",
                "operand": "@run.input",
                "cases": [
                    {"uuid": "case-red", "type": "has_any_word", "arguments": ["red"], "exit_uuid": "exit-red"},
                    {"uuid": "case-green", "type": "has_any_word", "arguments": ["green"], "exit_uuid": "exit-green"},
                ],
                "default_exit_uuid": "exit-other",
            },
            "exits": [
                {"uuid": "exit-red", "name": "Red", "destination_node_uuid": "node-thanks"},
                {"uuid": "exit-green", "name": "Green", "destination_node_uuid": "node-thanks"},
                {"uuid": "exit-other", "name": "Other", "destination_node_uuid": None},
            ],
            "wait": {"type": "msg", "timeout": 300},
        },
        {
            "uuid": "node-thanks",
            "actions": [
                {"uuid": "act-thanks", "type": "send_msg", "text": "Thanks!"}
            ],
            "exits": [
                {"uuid": "exit-thanks", "name": None, "destination_node_uuid": None}
            ],
        },
    ],
    "localization": {
        "spa": {
            "act-ask": {"text": "¿Cuál es tu color favorito?"},
        }
    },
    "_ui": {
        "nodes": {
            "node-ask": {"position": {"left": 0, "top": 0}},
            "node-wait": {"position": {"left": 0, "top": 160}, "type": "wait_for_response"},
            "node-thanks": {"position": {"left": 0, "top": 360}},
        }
    },
}


@pytest.fixture
def sample_definition() -> dict:
    """A small flow definition document."""
    return copy.deepcopy(SAMPLE_DEFINITION)
