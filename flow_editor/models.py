"""
Data Models for the Flow Editor engine.

Domain types are plain dataclasses that serialize to the flow definition's
JSON field names. The pydantic schemas at the bottom validate documents at
the import boundary.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Union
import uuid

from pydantic import BaseModel, ConfigDict, Field

from .config import ActionType, AssetType, EditorType, Operator, RouterType, WaitType


def create_uuid() -> str:
    """Mint a fresh uuid string."""
    return str(uuid.uuid4())


# =============================================================================
# Exceptions
# =============================================================================


class FlowEditorError(Exception):
    """Base exception for flow editor errors."""
    pass


class GraphIntegrityError(FlowEditorError):
    """A graph mutation would break node/exit consistency."""
    pass


class NodeNotFoundError(GraphIntegrityError):
    """Node not found in the node map."""
    pass


class DefinitionError(FlowEditorError):
    """Flow definition document could not be read."""
    pass


# =============================================================================
# Exit / Case Models
# =============================================================================


@dataclass
class Exit:
    """Named connection point from a node to its destination."""

    uuid: str
    name: Optional[str] = None
    destination_node_uuid: Optional[str] = None  # None = unterminated

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uuid": self.uuid,
            "name": self.name,
            "destination_node_uuid": self.destination_node_uuid,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Exit":
        return cls(
            uuid=data["uuid"],
            name=data.get("name"),
            destination_node_uuid=data.get("destination_node_uuid"),
        )


@dataclass
class Case:
    """One router rule pointing at an exit."""

    uuid: str
    type: Operator
    arguments: List[str] = field(default_factory=list)
    exit_uuid: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uuid": self.uuid,
            "type": self.type.value,
            "arguments": list(self.arguments),
            "exit_uuid": self.exit_uuid,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Case":
        return cls(
            uuid=data["uuid"],
            type=Operator(data["type"]),
            arguments=list(data.get("arguments") or []),
            exit_uuid=data.get("exit_uuid"),
        )


# =============================================================================
# Router Models
# =============================================================================


@dataclass
class Router:
    """Base for router variants."""

    type: ClassVar[RouterType]

    result_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value}
        if self.result_name:
            data["result_name"] = self.result_name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Router":
        router_cls = ROUTER_CLASSES[RouterType(data["type"])]
        return router_cls._from_dict(data)


@dataclass
class SwitchRouter(Router):
    """Evaluates cases against an operand, falling through to the default exit."""

    type: ClassVar[RouterType] = RouterType.SWITCH

    operand: str = ""
    cases: List[Case] = field(default_factory=list)
    default_exit_uuid: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "operand": self.operand,
            "cases": [c.to_dict() for c in self.cases],
            "default_exit_uuid": self.default_exit_uuid,
        })
        return data

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "SwitchRouter":
        return cls(
            result_name=data.get("result_name"),
            operand=data.get("operand", ""),
            cases=[Case.from_dict(c) for c in data.get("cases") or []],
            default_exit_uuid=data.get("default_exit_uuid"),
        )


@dataclass
class RandomRouter(Router):
    """Picks one of the node's exits at random."""

    type: ClassVar[RouterType] = RouterType.RANDOM

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "RandomRouter":
        return cls(result_name=data.get("result_name"))


ROUTER_CLASSES = {
    RouterType.SWITCH: SwitchRouter,
    RouterType.RANDOM: RandomRouter,
}


# =============================================================================
# Action / Node Models
# =============================================================================


@dataclass
class Action:
    """
    A single step inside a node.

    Kind-specific fields live in ``params`` and are serialized flat next to
    ``uuid`` and ``type``, so unknown keys survive a round trip.
    """

    uuid: str
    type: ActionType
    params: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.params.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return {"uuid": self.uuid, "type": self.type.value, **self.params}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Action":
        params = {k: v for k, v in data.items() if k not in ("uuid", "type")}
        return cls(uuid=data["uuid"], type=ActionType(data["type"]), params=params)


@dataclass
class Wait:
    """Pause before routing."""

    type: WaitType = WaitType.MSG
    timeout: Optional[int] = None  # seconds

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value}
        if self.timeout is not None:
            data["timeout"] = self.timeout
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Wait":
        return cls(type=WaitType(data.get("type", "msg")), timeout=data.get("timeout"))


@dataclass
class Node:
    """A unit of flow: ordered actions, an optional router and its exits."""

    uuid: str
    actions: List[Action] = field(default_factory=list)
    exits: List[Exit] = field(default_factory=list)
    router: Optional[Router] = None
    wait: Optional[Wait] = None

    def get_exit(self, exit_uuid: str) -> Optional[Exit]:
        return next((e for e in self.exits if e.uuid == exit_uuid), None)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "uuid": self.uuid,
            "actions": [a.to_dict() for a in self.actions],
            "exits": [e.to_dict() for e in self.exits],
        }
        if self.router is not None:
            data["router"] = self.router.to_dict()
        if self.wait is not None:
            data["wait"] = self.wait.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        return cls(
            uuid=data["uuid"],
            actions=[Action.from_dict(a) for a in data.get("actions") or []],
            exits=[Exit.from_dict(e) for e in data.get("exits") or []],
            router=Router.from_dict(data["router"]) if data.get("router") else None,
            wait=Wait.from_dict(data["wait"]) if data.get("wait") else None,
        )


@dataclass
class UINode:
    """Presentation metadata for a node."""

    position: Dict[str, float] = field(default_factory=lambda: {"left": 0, "top": 0})
    type: Optional[EditorType] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"position": dict(self.position)}
        if self.type is not None:
            data["type"] = self.type.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UINode":
        return cls(
            position=dict(data.get("position") or {"left": 0, "top": 0}),
            type=EditorType(data["type"]) if data.get("type") else None,
        )


@dataclass
class RenderNode:
    """A node plus its UI metadata and computed inbound connections."""

    ui: UINode
    node: Node
    inbound_connections: Dict[str, str] = field(default_factory=dict)  # source uuid -> exit uuid
    ghost: bool = False


RenderNodeMap = Dict[str, RenderNode]


# =============================================================================
# Asset Models
# =============================================================================


@dataclass(frozen=True)
class Asset:
    """A selectable value supplied by the asset search collaborator."""

    id: str
    name: str
    type: AssetType


REMOVE_VALUE_ASSET = Asset(id="remove", name="Remove Value", type=AssetType.REMOVE)


# =============================================================================
# Flow Definition
# =============================================================================


@dataclass
class FlowDefinition:
    """Root document: nodes, localization map and UI metadata."""

    uuid: str
    name: str
    language: Optional[str] = None
    nodes: List[Node] = field(default_factory=list)
    localization: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)
    ui: Dict[str, Any] = field(default_factory=lambda: {"nodes": {}})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uuid": self.uuid,
            "name": self.name,
            "language": self.language,
            "nodes": [n.to_dict() for n in self.nodes],
            "localization": self.localization,
            "_ui": self.ui,
        }


# =============================================================================
# Definition Schemas
# =============================================================================


class ExitSchema(BaseModel):
    uuid: str
    name: Optional[str] = None
    destination_node_uuid: Optional[str] = None


class CaseSchema(BaseModel):
    uuid: str
    type: Operator
    arguments: List[str] = Field(default_factory=list)
    exit_uuid: Optional[str] = None


class RouterSchema(BaseModel):
    type: RouterType
    result_name: Optional[str] = None
    operand: Optional[str] = None
    cases: List[CaseSchema] = Field(default_factory=list)
    default_exit_uuid: Optional[str] = None


class ActionSchema(BaseModel):
    """Actions keep any kind-specific keys."""

    model_config = ConfigDict(extra="allow")

    uuid: str
    type: ActionType


class WaitSchema(BaseModel):
    type: WaitType = WaitType.MSG
    timeout: Optional[int] = None


class NodeSchema(BaseModel):
    uuid: str
    actions: List[ActionSchema] = Field(default_factory=list)
    exits: List[ExitSchema] = Field(default_factory=list)
    router: Optional[RouterSchema] = None
    wait: Optional[WaitSchema] = None


class FlowDefinitionSchema(BaseModel):
    """Validates an imported flow definition document."""

    model_config = ConfigDict(populate_by_name=True)

    uuid: str
    name: str = ""
    language: Optional[str] = None
    nodes: List[NodeSchema] = Field(default_factory=list)
    localization: Dict[str, Dict[str, Dict[str, Any]]] = Field(default_factory=dict)
    ui: Dict[str, Any] = Field(default_factory=lambda: {"nodes": {}}, alias="_ui")


LocalizableObject = Union[Action, Case, Exit, Dict[str, Any]]


__all__ = [
    "create_uuid",
    # Exceptions
    "FlowEditorError",
    "GraphIntegrityError",
    "NodeNotFoundError",
    "DefinitionError",
    # Graph
    "Exit",
    "Case",
    "Router",
    "SwitchRouter",
    "RandomRouter",
    "Action",
    "Wait",
    "Node",
    "UINode",
    "RenderNode",
    "RenderNodeMap",
    # Assets
    "Asset",
    "REMOVE_VALUE_ASSET",
    # Definition
    "FlowDefinition",
    "FlowDefinitionSchema",
    "LocalizableObject",
]
