"""UI property descriptors for nodes and credentials.

Descriptors are declarative: they tell the host which fields to render, their
defaults, the dropdown choices and under which conditions a field is visible.
They are serialised with camelCase keys, which is what the host expects.
"""

import copy
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DisplayOptions(BaseModel):
    """Visibility rules: every `show` key must match, no `hide` key may match."""

    show: Dict[str, List[Any]] = Field(default_factory=dict)
    hide: Dict[str, List[Any]] = Field(default_factory=dict)

    def matches(self, parameters: Dict[str, Any]) -> bool:
        for key, allowed in self.show.items():
            if parameters.get(key) not in allowed:
                return False
        for key, hidden in self.hide.items():
            if key in parameters and parameters[key] in hidden:
                return False
        return True


class PropertyOption(BaseModel):
    """A selectable value of an `options` / `multiOptions` property."""

    name: str
    value: Any
    description: Optional[str] = None
    action: Optional[str] = None


class FixedCollectionGroup(BaseModel):
    """A repeatable group of values inside a `fixedCollection` property."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    display_name: str = Field(alias="displayName")
    values: List["NodeProperty"]


class NodeProperty(BaseModel):
    """A single field rendered by the host."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(alias="displayName")
    name: str
    type: str
    default: Any = None
    required: bool = False
    placeholder: Optional[str] = None
    description: Optional[str] = None
    no_data_expression: Optional[bool] = Field(None, alias="noDataExpression")
    type_options: Optional[Dict[str, Any]] = Field(None, alias="typeOptions")
    display_options: Optional[DisplayOptions] = Field(None, alias="displayOptions")
    options: Optional[
        List[Union[PropertyOption, FixedCollectionGroup, "NodeProperty"]]
    ] = None

    def is_displayed(self, parameters: Dict[str, Any]) -> bool:
        """Check the display conditions against the current parameter values."""
        if self.display_options is None:
            return True
        return self.display_options.matches(parameters)

    def option_values(self) -> List[Any]:
        """Values accepted by an `options` or `multiOptions` property."""
        return [
            option.value
            for option in self.options or []
            if isinstance(option, PropertyOption)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


FixedCollectionGroup.model_rebuild()
NodeProperty.model_rebuild()


def show_when(**conditions: List[Any]) -> DisplayOptions:
    """Shorthand for a `show`-only display rule."""
    return DisplayOptions(show=conditions)


def resolve_parameters(
    properties: List[NodeProperty], parameters: Dict[str, Any]
) -> Dict[str, Any]:
    """Fill in defaults for the properties visible under the given values.

    Properties are visited in declaration order so that a property gated on
    `operation` sees the operation's own default when none was supplied.
    """
    resolved = dict(parameters)
    for prop in properties:
        if prop.name in resolved or prop.type == "notice":
            continue
        if prop.is_displayed(resolved):
            resolved[prop.name] = copy.deepcopy(prop.default)
    return resolved


def find_property(
    properties: List[NodeProperty], name: str, parameters: Dict[str, Any]
) -> Optional[NodeProperty]:
    """Return the first visible property called `name`.

    Several operations declare a property with the same name (`url`,
    `options`), so visibility decides which declaration applies.
    """
    for prop in properties:
        if prop.name == name and prop.is_displayed(parameters):
            return prop
    return None


def describe(properties: List[NodeProperty]) -> List[Dict[str, Any]]:
    """Serialise descriptors for the host."""
    return [prop.to_dict() for prop in properties]
