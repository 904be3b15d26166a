"""Base class for Crawl4AI nodes."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..credentials import CREDENTIAL_NAME
from ..execution import ExecutionContext, Item, Operation, route
from ..properties import NodeProperty, describe


class CredentialRequirement(BaseModel):
    name: str = CREDENTIAL_NAME
    required: bool = True


class NodeDescription(BaseModel):
    """Static description of a node type, as the host renders it."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(alias="displayName")
    name: str
    icon: str = "file:crawl4ai.svg"
    group: List[str] = ["transform"]
    version: int = 1
    subtitle: str = '={{$parameter["operation"]}}'
    description: str
    defaults: Dict[str, Any] = {}
    inputs: List[str] = ["main"]
    outputs: List[str] = ["main"]
    usable_as_tool: Optional[bool] = Field(None, alias="usableAsTool")
    credentials: List[CredentialRequirement] = [CredentialRequirement()]
    properties: List[NodeProperty]

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True, exclude={"properties"})
        data["properties"] = describe(self.properties)
        return data


class Node:
    """A node type: a description plus a table of named operations."""

    description: NodeDescription
    operations: Dict[str, Operation] = {}

    @property
    def name(self) -> str:
        return self.description.name

    def create_context(self, **kwargs) -> ExecutionContext:
        """Build an ExecutionContext that knows this node's property defaults."""
        kwargs.setdefault("node_name", self.description.display_name)
        return ExecutionContext(properties=self.description.properties, **kwargs)

    async def execute(self, ctx: ExecutionContext) -> List[Item]:
        """Execution entry point, delegates to the router."""
        if not ctx.properties:
            ctx.properties = self.description.properties
        return await route(ctx, self.operations)
