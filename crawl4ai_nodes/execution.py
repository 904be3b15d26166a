"""Execution seam between the nodes and the host runtime.

The host hands a node its input items, the configured parameters, the
credentials and its error-continuation policy. ExecutionContext carries those;
`execute_per_item` and `route` implement the per-item error-continuation
convention every operation follows.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from .credentials import Crawl4aiCredentials
from .properties import NodeProperty, find_property, resolve_parameters

logger = logging.getLogger(__name__)

Item = Dict[str, Any]
ItemHandler = Callable[["ExecutionContext", int], Awaitable[Union[Dict[str, Any], List[Dict[str, Any]]]]]
Operation = Callable[["ExecutionContext", List[Item]], Awaitable[List[Item]]]

_MISSING = object()


class NodeOperationError(Exception):
    """An error raised by a node operation, tied to the failing input item."""

    def __init__(self, message: str, item_index: Optional[int] = None, node_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.item_index = item_index
        self.node_name = node_name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "itemIndex": self.item_index,
            "node": self.node_name,
        }


class ExecutionContext:
    """Per-execution state supplied by the host."""

    def __init__(
        self,
        items: Optional[List[Item]] = None,
        parameters: Optional[Dict[str, Any]] = None,
        credentials: Optional[Crawl4aiCredentials] = None,
        continue_on_fail: bool = False,
        node_name: str = "Crawl4AI",
        properties: Optional[List[NodeProperty]] = None,
    ):
        # A node always runs at least once, even without input
        self.items = items if items else [{"json": {}}]
        self.parameters = parameters or {}
        self.credentials = credentials
        self.continue_on_fail = continue_on_fail
        self.node_name = node_name
        self.properties = properties or []

    def get_input_data(self) -> List[Item]:
        return self.items

    def get_credentials(self) -> Crawl4aiCredentials:
        if self.credentials is None:
            raise NodeOperationError(
                "Crawl4AI credentials are not configured!", node_name=self.node_name
            )
        return self.credentials

    def error(self, message: str, item_index: Optional[int] = None) -> NodeOperationError:
        """Build a NodeOperationError bound to this node."""
        return NodeOperationError(message, item_index=item_index, node_name=self.node_name)

    def _evaluate(self, value: Any, item_index: int) -> Any:
        # Callables stand in for per-item expressions
        if callable(value):
            item = self.items[item_index] if item_index < len(self.items) else {"json": {}}
            return value(item.get("json", {}))
        return value

    def get_node_parameter(self, name: str, item_index: int = 0, default: Any = _MISSING) -> Any:
        """
        Read a parameter for an item.

        `name` may be a dotted path into a collection (e.g.
        "fields.fieldsValues"). Missing values fall back to the default of the
        visible property declaration, then to `default`.

        Raises:
            NodeOperationError: If the parameter is unknown and no default
                was given.
        """
        head, _, rest = name.partition(".")
        values = {key: self._evaluate(value, item_index) for key, value in self.parameters.items()}
        resolved = resolve_parameters(self.properties, values)

        value: Any = resolved.get(head, _MISSING)
        for part in rest.split(".") if rest else []:
            if isinstance(value, dict) and part in value:
                value = self._evaluate(value[part], item_index)
            else:
                value = _MISSING
                break

        if value is _MISSING or value is None:
            if default is not _MISSING:
                return default
            prop = find_property(self.properties, head, resolved)
            if prop is not None and not rest:
                return prop.default
            raise self.error(f'Could not get parameter "{name}"', item_index)
        return value


async def execute_per_item(
    ctx: ExecutionContext,
    items: List[Item],
    handler: ItemHandler,
) -> List[Item]:
    """
    Run `handler` for every input item.

    Each output is paired with its input item. A handler may return one json
    dict or several. When the host continues on failure, a failing item is
    passed through with its error attached and the loop moves on. Errors
    other than NodeOperationError are re-raised as one for the failing item.
    """
    results: List[Item] = []

    for index in range(len(items)):
        try:
            output = await handler(ctx, index)
        except NodeOperationError as e:
            if not ctx.continue_on_fail:
                raise
            error = ctx.error(e.message, index if e.item_index is None else e.item_index)
        except Exception as e:
            logger.debug(f"{ctx.node_name}: item {index} failed with {type(e).__name__}: {e}")
            error = ctx.error(str(e), index)
            if not ctx.continue_on_fail:
                raise error from e
        else:
            outputs = output if isinstance(output, list) else [output]
            for json_data in outputs:
                results.append({"json": json_data, "pairedItem": {"item": index}})
            continue

        results.append({
            "json": items[index].get("json", {}),
            "error": error,
            "pairedItem": {"item": index},
        })

    return results


async def route(ctx: ExecutionContext, operations: Dict[str, Operation]) -> List[Item]:
    """
    Dispatch to the operation selected by the `operation` parameter.

    Errors escaping the operation are attached to every input item when the
    host continues on failure.
    """
    items = ctx.get_input_data()

    try:
        operation = ctx.get_node_parameter("operation", 0)
        execute = operations.get(operation)
        if execute is None:
            raise ctx.error(f'The operation "{operation}" is not supported!', 0)
        logger.debug(f"{ctx.node_name}: running {operation} on {len(items)} item(s)")
        return await execute(ctx, items)
    except Exception as e:
        if not ctx.continue_on_fail:
            raise
        item_index = getattr(e, "item_index", None)
        return [
            {
                "json": item.get("json", {}),
                "error": ctx.error(str(e), index if item_index is None else item_index),
                "pairedItem": {"item": index},
            }
            for index, item in enumerate(items)
        ]
