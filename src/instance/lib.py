"""Instance data: the live property values of one placed element.

InstanceData is the read-only snapshot handed to template functions. It is
built directly by InstanceFactory, a fluent builder mirroring how a new
element is initialized from its component definition.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from pydantic import BaseModel, Field

from src.definition import ComponentDefinition, ElementEntitySubType, thaw_value

DEFAULT_ELEMENT_NAME = "Element"
BASE_ELEMENT_INPUTS: dict[str, Any] = {"hidden": False}
DEFAULT_STATE = "base"
PIXEL_UNITS = "px"
REFERENCE_ID_INPUT = "referenceId"

# =============================================================================
# Models
# =============================================================================


class KeyValue(BaseModel):
    """A named attribute value as entered in the attributes panel."""

    name: str = ""
    value: Any = None
    disabled: bool = False
    invalid: bool = False

    model_config = {"frozen": True}


class A11yInputs(BaseModel):
    """Accessibility inputs of an element."""

    aria_attrs: tuple[KeyValue, ...] = ()

    model_config = {"frozen": True}


class Frame(BaseModel):
    """Position and size of an element on its board."""

    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    locked: bool = False

    model_config = {"frozen": True}


class StyleGroup(BaseModel):
    """Style declarations for one interaction state."""

    style: dict[str, Any] = Field(default_factory=dict)
    overrides: tuple[KeyValue, ...] = ()

    model_config = {"frozen": True}


class InstanceData(BaseModel):
    """Snapshot of one placed element.

    Attributes:
        id: Element id.
        name: Layer name.
        element_type: Id of the component definition it was created from.
        project_id: Owning project.
        root_id: Board the element belongs to.
        parent_id: Parent element.
        child_ids: Ordered child element ids.
        inputs: Input values by name.
        attrs: Raw attributes, in entry order.
        a11y_inputs: Accessibility inputs.
        show_preview_styles: Whether preview styles are active.
        frame: Position and size.
        styles: Style groups keyed by state ("base", ":hover", ...).
        state: Current interaction state.
    """

    id: str = ""
    name: str = DEFAULT_ELEMENT_NAME
    element_type: str = ElementEntitySubType.GENERIC.value
    project_id: str | None = None
    root_id: str | None = None
    parent_id: str | None = None
    child_ids: tuple[str, ...] = ()
    inputs: dict[str, Any] = Field(default_factory=dict)
    attrs: tuple[KeyValue, ...] = ()
    a11y_inputs: A11yInputs | None = None
    show_preview_styles: bool = False
    frame: Frame = Field(default_factory=Frame)
    styles: dict[str, StyleGroup] = Field(default_factory=dict)
    state: str = DEFAULT_STATE

    model_config = {"frozen": True}

    @property
    def aria_attrs(self) -> tuple[KeyValue, ...]:
        return self.a11y_inputs.aria_attrs if self.a11y_inputs else ()

    @property
    def reference_id(self) -> str | None:
        """Element referenced by a portal or symbol instance, if any."""
        return self.inputs.get(REFERENCE_ID_INPUT) or None


# =============================================================================
# Helpers
# =============================================================================


def is_valid_attribute_value(value: Any) -> bool:
    """Attribute values of ``False`` or ``None`` are never rendered."""
    return value is not False and value is not None


def is_valid_attr(attr: KeyValue) -> bool:
    """True if an entered attribute should be rendered."""
    return (
        bool(attr.name)
        and not attr.disabled
        and not attr.invalid
        and is_valid_attribute_value(attr.value)
    )


def pixel_value(value: float) -> dict[str, Any]:
    """Style value in pixels."""
    return {"value": value, "units": PIXEL_UNITS}


def get_descendant_ids(element_id: str, elements: Mapping[str, InstanceData]) -> list[str]:
    """Collect an element id and every id reachable from it.

    Children are followed through ``child_ids`` and through the
    ``referenceId`` input of portals and symbol instances. Each id is
    listed once, so reference cycles terminate.

    Args:
        element_id: Starting element.
        elements: Project element map.

    Returns:
        Ids in depth-first order, starting with ``element_id``.
    """
    collected: list[str] = []
    seen: set[str] = set()
    stack = [element_id]
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        collected.append(current)
        element = elements.get(current)
        if element is None:
            continue
        next_ids = list(element.child_ids)
        if element.reference_id:
            next_ids.append(element.reference_id)
        stack.extend(reversed(next_ids))
    return collected


# =============================================================================
# Factory
# =============================================================================


class InstanceFactory:
    """Fluent builder producing an InstanceData record.

    Example:
        >>> data = (
        ...     InstanceFactory("proj", "el1")
        ...     .assign_name("Title")
        ...     .add_inputs({"innerHTML": "Hello"})
        ...     .build()
        ... )
        >>> data.inputs["innerHTML"]
        'Hello'
    """

    def __init__(
        self,
        project_id: str | None,
        element_id: str,
        definition: ComponentDefinition | None = None,
    ):
        self.project_id = project_id
        self.id = element_id
        self.name = DEFAULT_ELEMENT_NAME
        self.element_type: str = ElementEntitySubType.GENERIC.value
        self.child_ids: list[str] = []
        self.inputs: dict[str, Any] = dict(BASE_ELEMENT_INPUTS)
        self.attrs: list[KeyValue] = []
        self.a11y_inputs: A11yInputs | None = None
        self.frame = Frame()
        self.root_id: str | None = None
        self.parent_id: str | None = None
        self.base_style: dict[str, Any] = {}
        self.styles: dict[str, StyleGroup] = {}

        if definition is None or definition.id != ElementEntitySubType.SYMBOL_INSTANCE:
            self.base_style["display"] = "block"
        self.base_style["position"] = "relative"
        self.base_style["opacity"] = 1

        if definition is not None:
            self._init_from_definition(definition)

    def _init_from_definition(self, definition: ComponentDefinition) -> None:
        self.element_type = definition.id
        self.name = definition.title or DEFAULT_ELEMENT_NAME

        if definition.styles:
            self.add_base_style(thaw_value(definition.styles))
        if definition.width:
            self.base_style["width"] = pixel_value(definition.width)
        if definition.height:
            self.base_style["height"] = pixel_value(definition.height)

        self.add_attributes(
            KeyValue(name=name, value=value) for name, value in definition.attrs.items()
        )

        inputs = thaw_value(definition.inputs)
        for prop in definition.all_properties:
            if prop.name and prop.default_value is not None:
                inputs[prop.name] = prop.default_value
        self.add_inputs(inputs)

        if definition.resize_type == "uniform":
            self.frame = self.frame.model_copy(update={"locked": True})

    def assign_name(self, name: str) -> InstanceFactory:
        self.name = name
        return self

    def assign_child_ids(self, child_ids: Iterable[str]) -> InstanceFactory:
        self.child_ids = list(child_ids)
        return self

    def assign_root_id(self, root_id: str) -> InstanceFactory:
        self.root_id = root_id
        return self

    def assign_parent_id(self, parent_id: str) -> InstanceFactory:
        self.parent_id = parent_id
        return self

    def assign_frame(self, width: float, height: float, x: float = 0, y: float = 0) -> InstanceFactory:
        self.frame = self.frame.model_copy(update={"width": width, "height": height, "x": x, "y": y})
        return self

    def assign_a11y_inputs(self, a11y_inputs: A11yInputs) -> InstanceFactory:
        self.a11y_inputs = a11y_inputs
        return self

    def add_attributes(self, attrs: Iterable[KeyValue]) -> InstanceFactory:
        """Append attributes, dropping those whose value is False or None."""
        self.attrs.extend(attr for attr in attrs if is_valid_attribute_value(attr.value))
        return self

    def add_inputs(self, inputs: Mapping[str, Any]) -> InstanceFactory:
        self.inputs.update(inputs)
        return self

    def add_base_style(self, style: Mapping[str, Any]) -> InstanceFactory:
        self.base_style.update(style)
        return self

    def add_state_style(self, state: str, style: Mapping[str, Any]) -> InstanceFactory:
        """Set the style declarations of a non-base state such as ``:hover``."""
        self.styles[state] = StyleGroup(style=dict(style))
        return self

    def build(self) -> InstanceData:
        styles = {DEFAULT_STATE: StyleGroup(style=dict(self.base_style)), **self.styles}
        return InstanceData(
            id=self.id,
            name=self.name,
            element_type=self.element_type,
            project_id=self.project_id,
            root_id=self.root_id,
            parent_id=self.parent_id,
            child_ids=tuple(self.child_ids),
            inputs=dict(self.inputs),
            attrs=tuple(self.attrs),
            a11y_inputs=self.a11y_inputs,
            frame=self.frame,
            styles=styles,
        )


def create_instance(
    definition: ComponentDefinition,
    element_id: str,
    project_id: str | None = None,
) -> InstanceData:
    """Create the instance data of a newly placed element.

    Args:
        definition: Definition the element is created from.
        element_id: Id of the new element.
        project_id: Owning project.

    Returns:
        InstanceData seeded from the definition's styles, attributes,
        inputs and property default values.
    """
    return InstanceFactory(project_id, element_id, definition).build()
