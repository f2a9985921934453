"""Unit tests for the graph model."""

from dataclasses import replace

import pytest

from flow_editor.canvas.graph import GraphModel, create_action_node, validate_router
from flow_editor.config import ActionType, EditorType, Operator
from flow_editor.models import (
    Action,
    Case,
    Exit,
    GraphIntegrityError,
    NodeNotFoundError,
    RenderNode,
    SwitchRouter,
    UINode,
)


class TestGraphInit:
    """Tests for building a graph."""

    def test_inbound_index(self, graph):
        """Test inbound connections are derived from exits."""
        assert graph.get_node("n1").inbound_connections == {}
        assert graph.get_node("n2").inbound_connections == {"n1": "n1-e0"}
        assert graph.get_node("n3").inbound_connections == {"n1": "n1-e1", "n2": "n2-e0"}
        assert graph.check_consistency() == []

    def test_dangling_destination(self, node_factory):
        """Test exits to unknown nodes are rejected."""
        with pytest.raises(GraphIntegrityError):
            GraphModel({"n1": node_factory("n1", ["missing"])})

    def test_stale_inbound_is_recomputed(self, chain_nodes):
        """Test supplied inbound connections are ignored."""
        chain_nodes["n1"].inbound_connections = {"n3": "bogus"}

        graph = GraphModel(chain_nodes)

        assert graph.get_node("n1").inbound_connections == {}

    def test_caller_map_not_shared(self, chain_nodes):
        """Test the graph owns a copy of the initial map."""
        graph = GraphModel(chain_nodes)
        chain_nodes["n2"].node.exits[0].destination_node_uuid = None

        assert graph.get_node("n2").node.exits[0].destination_node_uuid == "n3"


class TestUpsertNode:
    """Tests for upsert_node."""

    def test_add_node(self, graph, node_factory):
        """Test a new node pointing into the graph updates its destination."""
        graph.upsert_node(node_factory("n4", ["n1"]))

        assert "n4" in graph
        assert graph.get_node("n1").inbound_connections == {"n4": "n4-e0"}
        assert graph.check_consistency() == []

    def test_replace_node_moves_connections(self, graph, node_factory):
        """Test replacing a node's exits clears its old destinations."""
        graph.upsert_node(node_factory("n2", [None]))

        assert "n2" not in graph.get_node("n3").inbound_connections
        assert graph.get_node("n2").inbound_connections == {"n1": "n1-e0"}
        assert graph.check_consistency() == []

    def test_unknown_destination_leaves_map(self, graph, node_factory):
        """Test a failed upsert keeps the previous map."""
        before = graph.nodes

        with pytest.raises(GraphIntegrityError):
            graph.upsert_node(node_factory("n4", ["nowhere"]))

        assert graph.nodes is before
        assert "n4" not in graph

    def test_self_loop(self, graph, node_factory):
        """Test a node may exit to itself."""
        graph.upsert_node(node_factory("n4", ["n4"]))

        assert graph.get_node("n4").inbound_connections == {"n4": "n4-e0"}

    def test_snapshots_are_not_mutated(self, graph, node_factory):
        """Test a map held before an upsert stays as it was."""
        before = graph.nodes

        graph.upsert_node(node_factory("n4", ["n1"]))

        assert "n4" not in before
        assert before["n1"].inbound_connections == {}


class TestRemoveNode:
    """Tests for remove_node."""

    def test_remove_unterminates_sources(self, graph):
        """Test exits into a removed node are left unterminated."""
        graph.remove_node("n2")

        assert "n2" not in graph
        assert graph.get_node("n1").node.exits[0].destination_node_uuid is None
        assert graph.get_node("n3").inbound_connections == {"n1": "n1-e1"}
        assert graph.check_consistency() == []

    def test_remove_unknown(self, graph):
        """Test removing an unknown node raises."""
        with pytest.raises(NodeNotFoundError):
            graph.remove_node("missing")


class TestConnections:
    """Tests for connect and disconnect."""

    def test_connect(self, graph):
        """Test rerouting an exit updates both old and new destinations."""
        graph.connect("n1", "n1-e1", "n2")

        assert graph.get_node("n2").inbound_connections == {"n1": "n1-e0"}
        assert graph.get_node("n3").inbound_connections == {"n2": "n2-e0"}
        assert graph.check_consistency() == []

    def test_connect_foreign_exit(self, graph):
        """Test an exit must belong to the source node."""
        before = graph.nodes

        with pytest.raises(GraphIntegrityError):
            graph.connect("n1", "n2-e0", "n3")

        assert graph.nodes is before

    def test_connect_unknown_destination(self, graph):
        """Test the destination must exist."""
        before = graph.nodes

        with pytest.raises(GraphIntegrityError):
            graph.connect("n1", "n1-e0", "missing")

        assert graph.nodes is before

    def test_connect_unknown_source(self, graph):
        """Test the source must exist."""
        with pytest.raises(NodeNotFoundError):
            graph.connect("missing", "n1-e0", "n3")

    def test_disconnect(self, graph):
        """Test disconnecting removes the inbound entry."""
        graph.disconnect("n2", "n2-e0")

        assert graph.get_node("n2").node.exits[0].destination_node_uuid is None
        assert graph.get_node("n3").inbound_connections == {"n1": "n1-e1"}

    def test_consistency_after_operation_sequence(self, graph, node_factory):
        """Test the inbound index stays in agreement across mixed operations."""
        graph.upsert_node(node_factory("n4", ["n3", "n1"]))
        graph.connect("n3", "n3-e0", "n4")
        graph.connect("n1", "n1-e0", "n4")
        graph.remove_node("n2")
        graph.upsert_node(node_factory("n5", ["n4"]))
        graph.connect("n4", "n4-e1", "n5")
        graph.remove_node("n3")
        graph.disconnect("n5", "n5-e0")

        assert graph.check_consistency() == []
        assert graph.get_node("n4").inbound_connections == {"n1": "n1-e0"}
        assert graph.get_node("n5").inbound_connections == {"n4": "n4-e1"}


class TestActions:
    """Tests for action operations."""

    def test_update_action_replaces(self, graph):
        """Test an action with a known uuid is replaced."""
        action = Action(uuid="n1-a0", type=ActionType.SEND_MSG, params={"text": "Changed"})

        graph.update_action("n1", action)

        assert graph.get_node("n1").node.actions == [action]

    def test_update_action_appends(self, graph):
        """Test an action with a new uuid is appended."""
        action = Action(uuid="n1-a1", type=ActionType.ADD_INPUT_LABELS, params={"labels": []})

        graph.update_action("n1", action)

        assert [a.uuid for a in graph.get_node("n1").node.actions] == ["n1-a0", "n1-a1"]
        assert graph.check_consistency() == []

    def test_remove_last_action_removes_node(self, graph):
        """Test a node without actions or router disappears."""
        graph.remove_action("n2", "n2-a0")

        assert "n2" not in graph
        assert graph.check_consistency() == []

    def test_remove_action(self, graph):
        """Test removing one of several actions keeps the node."""
        graph.update_action("n1", Action(uuid="n1-a1", type=ActionType.SEND_MSG, params={"text": "Two"}))

        graph.remove_action("n1", "n1-a0")

        assert [a.uuid for a in graph.get_node("n1").node.actions] == ["n1-a1"]

    def test_remove_unknown_action(self, graph):
        """Test removing an action the node doesn't have raises."""
        with pytest.raises(GraphIntegrityError):
            graph.remove_action("n1", "missing")

    def test_move_action_up(self, graph):
        """Test an action swaps with its predecessor."""
        graph.update_action("n1", Action(uuid="n1-a1", type=ActionType.SEND_MSG, params={"text": "Two"}))

        graph.move_action_up("n1", "n1-a1")
        graph.move_action_up("n1", "n1-a1")

        assert [a.uuid for a in graph.get_node("n1").node.actions] == ["n1-a1", "n1-a0"]


class TestRouters:
    """Tests for installing and removing routers."""

    def _router_fragment(self, uuid, exits, default_exit_uuid):
        cases = [Case(uuid="c1", type=Operator.HAS_ANY_WORD, arguments=["red"], exit_uuid=exits[0].uuid)]
        return RenderNode(
            ui=UINode(type=EditorType.SPLIT_BY_EXPRESSION),
            node=replace(
                create_action_node(Action(uuid="x", type=ActionType.SEND_MSG)).node,
                uuid=uuid,
                actions=[],
                exits=exits,
                router=SwitchRouter(operand="@run.input", cases=cases, default_exit_uuid=default_exit_uuid),
            ),
        )

    def test_update_router(self, graph):
        """Test a router fragment replaces the node but keeps its position."""
        exits = [Exit(uuid="red", name="Red", destination_node_uuid="n3"), Exit(uuid="other", name="Other")]

        graph.update_router(self._router_fragment("n2", exits, "other"))

        n2 = graph.get_node("n2")
        assert n2.ui.position == {"left": 0, "top": 200}
        assert n2.ui.type == EditorType.SPLIT_BY_EXPRESSION
        assert n2.inbound_connections == {"n1": "n1-e0"}
        assert graph.get_node("n3").inbound_connections == {"n1": "n1-e1", "n2": "red"}
        assert graph.check_consistency() == []

    def test_update_router_rejects_missing_exit(self, graph):
        """Test routers must reference their own exits."""
        before = graph.nodes
        fragment = self._router_fragment("n2", [Exit(uuid="red", name="Red")], "missing")

        with pytest.raises(GraphIntegrityError):
            graph.update_router(fragment)

        assert graph.nodes is before
        assert validate_router(fragment.node)

    def test_remove_router_keeps_default(self, graph):
        """Test removing a router keeps the default exit's connection."""
        exits = [Exit(uuid="red", name="Red"), Exit(uuid="other", name="Other", destination_node_uuid="n3")]
        graph.update_router(self._router_fragment("n2", exits, "other"))

        graph.remove_router("n2")

        n2 = graph.get_node("n2")
        assert n2.node.router is None
        assert n2.ui.type is None
        assert [(e.uuid, e.name, e.destination_node_uuid) for e in n2.node.exits] == [("other", None, "n3")]
        assert graph.check_consistency() == []


class TestGhosts:
    """Tests for ghost nodes."""

    def test_commit_ghost(self, graph):
        """Test committing clears the ghost flag."""
        ghost = create_action_node(Action(uuid="g-a0", type=ActionType.SEND_MSG), ghost=True)
        graph.upsert_node(ghost)

        graph.commit_ghost(ghost.node.uuid)

        assert graph.get_node(ghost.node.uuid).ghost is False
