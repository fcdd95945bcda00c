"""Pydantic models for workflow graph nodes with discriminated unions.

Each node variant (trigger, idea, draft, media, platform, conditional) carries
its own typed ``data`` model, selected by the ``type`` discriminator. Field
names are snake_case in Python and camelCase on the wire, matching the
React Flow client payloads.

Unknown node types fall back to ``GenericNode`` with free-form data so that
graphs authored with newer client node types still load.
"""

from typing import Literal, Union, Annotated, Optional, Dict, Any, List, Iterable
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from constants import WORKFLOW_NODE_TYPES


# =============================================================================
# BASE MODELS
# =============================================================================

class BaseNodeData(BaseModel):
    """Base class for all node payloads."""
    # UI fields (label, connections, sourceNodes, ...) ride along untouched
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class BaseNode(BaseModel):
    """Base class for all workflow nodes."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str


# =============================================================================
# IMAGE SUGGESTIONS
# =============================================================================

class ImageUrls(BaseModel):
    model_config = ConfigDict(extra="allow")

    small: str = ""
    regular: str = ""
    thumb: Optional[str] = None


class ImageUserLinks(BaseModel):
    model_config = ConfigDict(extra="allow")

    html: str = ""


class ImageUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    links: Optional[ImageUserLinks] = None


class ImageSuggestion(BaseModel):
    """Image suggestion record returned by the image search backend."""
    model_config = ConfigDict(extra="allow")

    id: str
    urls: ImageUrls = Field(default_factory=ImageUrls)
    alt_description: Optional[str] = None
    description: Optional[str] = None
    user: Optional[ImageUser] = None


# =============================================================================
# NODE DATA MODELS
# =============================================================================

class TriggerData(BaseNodeData):
    """Trigger nodes carry no payload."""


class IdeaData(BaseNodeData):
    topic: str = ""
    ideas: Optional[List[str]] = None
    selected_idea: Optional[str] = Field(default=None, alias="selectedIdea")
    has_generated: bool = Field(default=False, alias="hasGenerated")

    @field_validator("topic", mode="before")
    @classmethod
    def topic_or_empty(cls, v):
        # Cleared inputs arrive as null from the client
        return "" if v is None else v


class DraftData(BaseNodeData):
    prompt: str = ""
    draft: Optional[str] = None
    has_generated: bool = Field(default=False, alias="hasGenerated")

    @field_validator("prompt", mode="before")
    @classmethod
    def prompt_or_empty(cls, v):
        return "" if v is None else v


class MediaData(BaseNodeData):
    query: str = ""
    images: Optional[List[ImageSuggestion]] = None
    selected_image: Optional[ImageSuggestion] = Field(default=None, alias="selectedImage")
    has_searched: bool = Field(default=False, alias="hasSearched")

    @field_validator("query", mode="before")
    @classmethod
    def query_or_empty(cls, v):
        return "" if v is None else v


class PlatformData(BaseNodeData):
    platform: Optional[str] = None


ConditionName = Literal["hasDraft", "hasImage", "isPlatformSelected"]


class ConditionalData(BaseNodeData):
    condition: Optional[ConditionName] = None
    # Derived at evaluation time, never authored
    result: Optional[bool] = None


# =============================================================================
# NODE MODELS
# =============================================================================

class TriggerNode(BaseNode):
    type: Literal["triggerNode"]
    data: TriggerData = Field(default_factory=TriggerData)


class IdeaNode(BaseNode):
    type: Literal["ideaNode"]
    data: IdeaData = Field(default_factory=IdeaData)


class DraftNode(BaseNode):
    type: Literal["draftNode"]
    data: DraftData = Field(default_factory=DraftData)


class MediaNode(BaseNode):
    type: Literal["mediaNode"]
    data: MediaData = Field(default_factory=MediaData)


class PlatformNode(BaseNode):
    type: Literal["platformNode"]
    data: PlatformData = Field(default_factory=PlatformData)


class ConditionalNode(BaseNode):
    type: Literal["conditionalNode"]
    data: ConditionalData = Field(default_factory=ConditionalData)


class GenericNode(BaseNode):
    """Fallback for node types this service has no behavior for."""
    type: str = "unknown"
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def data_or_empty(cls, v):
        return {} if v is None else v


KnownNode = Annotated[
    Union[TriggerNode, IdeaNode, DraftNode, MediaNode, PlatformNode, ConditionalNode],
    Field(discriminator="type")
]

WorkflowNode = Union[TriggerNode, IdeaNode, DraftNode, MediaNode, PlatformNode,
                     ConditionalNode, GenericNode]


# =============================================================================
# EDGES
# =============================================================================

class Edge(BaseModel):
    """Directed edge between two nodes.

    Conditional nodes tag their two outgoing edges with sourceHandle
    "true" / "false".
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = None
    source: str
    target: str
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")


# =============================================================================
# VALIDATION HELPERS
# =============================================================================

# Created once at module level, TypeAdapter construction is not free
_known_node_adapter = TypeAdapter(KnownNode)


def parse_node(raw: Union[Dict[str, Any], BaseNode], strict: bool = True) -> WorkflowNode:
    """Validate a single node dict into its variant model.

    Known types go through the discriminated union. Unknown types become
    GenericNode.

    Args:
        raw: Node dict or already parsed node (returned as-is)
        strict: When True a bad payload for a known type raises
                ValidationError; when False it degrades to a GenericNode
                that keeps the type tag and the raw data
    """
    if isinstance(raw, BaseNode):
        return raw
    node_type = raw.get("type")
    if node_type in WORKFLOW_NODE_TYPES:
        try:
            return _known_node_adapter.validate_python(raw)
        except ValidationError:
            if strict:
                raise
    return GenericNode.model_validate(raw)


def parse_nodes(raw_nodes: Iterable[Union[Dict[str, Any], BaseNode]],
                strict: bool = True) -> List[WorkflowNode]:
    """Validate a list of node dicts."""
    return [parse_node(raw, strict=strict) for raw in (raw_nodes or [])]


def parse_edges(raw_edges: Iterable[Union[Dict[str, Any], Edge]]) -> List[Edge]:
    """Validate a list of edge dicts."""
    return [e if isinstance(e, Edge) else Edge.model_validate(e) for e in (raw_edges or [])]


def node_data_dict(node: WorkflowNode) -> Dict[str, Any]:
    """Dump a node's payload as a camelCase dict."""
    if isinstance(node.data, BaseModel):
        return node.data.model_dump(by_alias=True, mode="json")
    return dict(node.data)


def node_to_dict(node: WorkflowNode) -> Dict[str, Any]:
    """Dump a node to the JSON shape the client sends."""
    return node.model_dump(by_alias=True, mode="json")


__all__ = [
    "ImageSuggestion", "TriggerData", "IdeaData", "DraftData", "MediaData",
    "PlatformData", "ConditionalData", "ConditionName",
    "BaseNode", "TriggerNode", "IdeaNode", "DraftNode", "MediaNode",
    "PlatformNode", "ConditionalNode", "GenericNode", "WorkflowNode", "Edge",
    "parse_node", "parse_nodes", "parse_edges", "node_data_dict", "node_to_dict",
]
