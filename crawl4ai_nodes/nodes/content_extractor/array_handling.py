"""Split list results of an extraction into separate output items."""

from typing import Any, Dict, List

ARRAY_HANDLING_NONE = "none"
ARRAY_HANDLING_TOP_LEVEL = "topLevel"
ARRAY_HANDLING_ALL_OBJECTS = "allObjects"
ARRAY_HANDLING_SMART = "smart"


def _split(items: List[Any], base: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        {**base, **item} if isinstance(item, dict) else {**base, "value": item}
        for item in items
    ]


def _looks_like_records(items: List[Any]) -> bool:
    # Objects with several properties are likely the main content
    first = items[0]
    return isinstance(first, dict) and len(first) >= 2


def process_array_handling(
    data: Dict[str, Any],
    strategy: str,
    include_metadata: bool = False,
) -> List[Dict[str, Any]]:
    """
    Apply an array handling strategy to a formatted extraction result.

    Strategies:
        none: keep the result as one item
        topLevel: one item per entry of "data"
        allObjects: split only when the entries are objects
        smart: split only when the entries look like records

    Args:
        data: Output of format_extraction_result
        strategy: One of the strategies above
        include_metadata: Copy url/success/statusCode etc. into every split item

    Returns:
        List of output json dicts
    """
    if strategy == ARRAY_HANDLING_NONE:
        return [data]

    items = data.get("data")
    if not isinstance(items, list) or not items:
        return [data]

    base: Dict[str, Any] = {}
    if include_metadata:
        base = {key: value for key, value in data.items() if key != "data"}

    if strategy == ARRAY_HANDLING_TOP_LEVEL:
        return _split(items, base)
    if strategy == ARRAY_HANDLING_ALL_OBJECTS:
        if isinstance(items[0], dict):
            return _split(items, base)
        return [data]
    if strategy == ARRAY_HANDLING_SMART:
        if _looks_like_records(items):
            return _split(items, base)
        return [data]
    return [data]
