"""Component registry.

The Registry owns every registered ComponentDefinition, an alias map for
alternative (mostly deprecated) ids, an index of definitions exposing
portal slots, and a cache of library queries. Definitions are processed
(default properties, variant conditions) and validated before they are
stored; a failed registration leaves the registry untouched.
"""

from typing import Callable, Iterable, TypeVar

from src.core.log import get_logger
from src.definition import (
    ALL_LIBRARIES,
    BUILT_IN_IDS,
    BindingType,
    ComponentDefinition,
    ConditionType,
    ElementEntitySubType,
    PropertyCondition,
    PropertyGroup,
    PropertyType,
    ResizeType,
    freeze_definition,
    get_props_recursive,
    props_contain_portal_slot,
)
from src.instance import Frame, InstanceData
from src.validation import ValidationError, validate_definition

logger = get_logger("registry")

D = TypeVar("D", bound=type[ComponentDefinition])


class RegistrationError(Exception):
    """Raised when a definition may not be registered.

    Attributes:
        component_id: Id of the rejected definition.
    """

    def __init__(self, message: str, component_id: str | None = None):
        super().__init__(message)
        self.component_id = component_id


class LayerIcons:
    """Icons shown for elements in the layers tree."""

    HOME = "home"
    ICON = "emoji_emotions"
    BOARD = "dashboard"
    COMPONENT = "widgets"
    FOLDER = "folder"
    GENERIC_ELEMENT = "crop_square"


# Injected property groups
SIZE_CONFIG = PropertyGroup(type=PropertyType.STYLE_SIZE)
POSITION_CONFIG = PropertyGroup(type=PropertyType.STYLE_POSITION)
OPACITY_CONFIG = PropertyGroup(children=(PropertyGroup(type=PropertyType.STYLE_OPACITY),))
ADVANCED_CONFIG = PropertyGroup(type=PropertyType.STYLE_ADVANCED, label="Advanced")
HIDDEN_CONFIG = PropertyGroup(type=PropertyType.HIDDEN, label="Hidden")


# =============================================================================
# Property Processing
# =============================================================================


def _missing_property(props: Iterable[PropertyGroup], prop_type: PropertyType) -> bool:
    return not any(prop.type == prop_type for prop in props)


def _process_property(prop: PropertyGroup, variant_prop_name: str | None) -> PropertyGroup:
    update: dict = {}
    if prop.input_type is not None and prop.type is None:
        update["type"] = PropertyType.ATTRIBUTE_GENERIC.value
    if variant_prop_name and prop.variant and prop.name:
        update["conditions"] = (
            PropertyCondition(
                name=variant_prop_name,
                type=ConditionType.EQUALS,
                value=prop.variant,
            ),
        )
    if prop.children:
        update["children"] = tuple(
            _process_property(child, variant_prop_name) for child in prop.children
        )
    return prop.model_copy(update=update) if update else prop


def process_properties(definition: ComponentDefinition) -> tuple[PropertyGroup, ...]:
    """Return the definition's properties with registry defaults applied.

    - Properties with an input type but no type become generic attributes.
    - Unless disabled, size, position and opacity groups are prepended and
      the advanced and hidden groups appended, each only when missing.
    - Properties scoped to a variant gain an equality condition on the
      variant-binding property.
    """
    all_props = get_props_recursive(definition.properties)
    variant_prop = definition.variant_property()
    variant_prop_name = variant_prop.name if variant_prop else None

    props = [_process_property(prop, variant_prop_name) for prop in definition.properties]

    if definition.auto_add_default_properties:
        if _missing_property(all_props, PropertyType.STYLE_OPACITY):
            props.insert(0, OPACITY_CONFIG)
        if _missing_property(all_props, PropertyType.STYLE_POSITION):
            props.insert(0, POSITION_CONFIG)
        resizable = definition.resize_type in (None, ResizeType.ANY)
        if (
            _missing_property(all_props, PropertyType.STYLE_SIZE)
            and not definition.prevent_resize
            and resizable
        ):
            props.insert(0, SIZE_CONFIG)
        if _missing_property(all_props, PropertyType.STYLE_ADVANCED):
            props.append(ADVANCED_CONFIG)
            props.append(HIDDEN_CONFIG)

    return tuple(props)


def code_component_tag_name(component_id: str, tag_name: str) -> str:
    """Scoped custom-element tag of a code component."""
    return f"{tag_name}-{component_id.lower()}"


# =============================================================================
# Registry
# =============================================================================


class Registry:
    """Catalog of registered component definitions.

    Example:
        >>> registry = Registry()
        >>> registry.register(ComponentDefinition(id="chip", title="Chip", tag_name="span"))
        >>> registry.get_component("chip").tag_name
        'span'
    """

    def __init__(self):
        self._components: dict[str, ComponentDefinition] = {}
        self._aliases: dict[str, ComponentDefinition] = {}
        self._portal_slot_ids: set[str] = set()
        self._query_cache: dict[str, tuple[ComponentDefinition, ...]] = {}

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._components or component_id in self._aliases

    def __len__(self) -> int:
        return len(self._components)

    def register(self, definition: ComponentDefinition) -> list[ValidationError] | None:
        """Process, validate and store a definition.

        Args:
            definition: Definition to register.

        Returns:
            None on success, otherwise the validation errors. A failed
            registration stores nothing.

        Raises:
            RegistrationError: If a built-in id is already registered.
        """
        component_id = definition.id
        if component_id in BUILT_IN_IDS and component_id in self._components:
            raise RegistrationError(
                f"Attempted re-registration of built-in component '{component_id}'",
                component_id,
            )

        processed, errors = self._prepare(definition)
        if errors:
            return errors
        self._store(processed)
        return None

    def _prepare(
        self, definition: ComponentDefinition
    ) -> tuple[ComponentDefinition, list[ValidationError]]:
        """Process and validate a definition without storing it."""
        processed = definition.model_copy(update={"properties": process_properties(definition)})

        errors = validate_definition(processed)
        if errors:
            label = processed.title or processed.id
            for error in errors:
                logger.error(f"{label}: {error}")
        return processed, errors

    def _store(self, processed: ComponentDefinition) -> None:
        component_id = processed.id
        stored = freeze_definition(processed)

        self._drop_aliases(component_id)
        self._components[component_id] = stored
        for alias in stored.aliases:
            self._aliases[alias] = stored

        if props_contain_portal_slot(stored.properties):
            self._portal_slot_ids.add(component_id)
        else:
            self._portal_slot_ids.discard(component_id)

        self._query_cache.clear()
        logger.debug(f"Registered component '{component_id}'")

    def _drop_aliases(self, component_id: str) -> None:
        stale = [alias for alias, target in self._aliases.items() if target.id == component_id]
        for alias in stale:
            del self._aliases[alias]

    def register_code_component(
        self,
        definition: ComponentDefinition,
        frame: Frame | None = None,
    ) -> list[ValidationError] | None:
        """Register or re-register a user-authored code component.

        Unnamed properties are dropped, the remaining ones become data
        bindable (css vars excepted) and are grouped under one property
        group. The tag is scoped to the component id; the original tag is
        kept for export.

        Args:
            definition: Code component definition.
            frame: Initial frame whose size becomes the default size.

        Returns:
            None on success, otherwise the validation errors. A failed
            re-registration keeps the previous definition.
        """
        props = tuple(
            prop.model_copy(update={"data_bindable": prop.binding_type != BindingType.CSS_VAR})
            for prop in definition.properties
            if prop.name
        )

        update: dict = {
            "properties": (PropertyGroup(children=props),),
            "is_code_component": True,
        }
        if frame is not None:
            update["width"] = int(frame.width)
            update["height"] = int(frame.height)
        if definition.tag_name:
            update["export_tag_name"] = definition.tag_name
            update["tag_name"] = code_component_tag_name(definition.id, definition.tag_name)

        processed, errors = self._prepare(definition.model_copy(update=update))
        if errors:
            return errors

        self.unregister_code_component(definition.id)
        self._store(processed)
        return None

    def unregister_code_component(self, component_id: str) -> bool:
        """Remove a definition so it can be registered again.

        Returns:
            True if a definition was removed.
        """
        removed = self._components.pop(component_id, None)
        if removed is None:
            return False
        self._drop_aliases(component_id)
        self._portal_slot_ids.discard(component_id)
        self._query_cache.clear()
        return True

    def get_component(self, component_id: str | None) -> ComponentDefinition | None:
        """Look up a definition by id, then by alias."""
        if not component_id:
            return None
        if component_id in self._components:
            return self._components[component_id]
        if component_id in self._aliases:
            return self._aliases[component_id]
        logger.warning(f"Component '{component_id}' not found")
        return None

    def get_components(
        self,
        library: str = ALL_LIBRARIES,
        ignore_deprecated: bool = False,
    ) -> tuple[ComponentDefinition, ...]:
        """Definitions of a library, optionally without deprecated ones.

        Results are cached per ``library:ignore_deprecated`` key until the
        next registration change.
        """
        key = f"{library}:{str(ignore_deprecated).lower()}"
        cached = self._query_cache.get(key)
        if cached is not None:
            return cached

        results = tuple(
            definition
            for definition in self._components.values()
            if not (ignore_deprecated and definition.deprecated)
            and (library == ALL_LIBRARIES or definition.library == library)
        )
        self._query_cache[key] = results
        return results

    def get_alias_ids(self) -> list[str]:
        return list(self._aliases)

    def list_components(self) -> list[str]:
        """Registered definition ids in registration order."""
        return list(self._components)

    def has_portal_slot(self, element_type: str) -> bool:
        """True if elements of this type expose a child portal slot."""
        return element_type in self._portal_slot_ids

    def clear(self) -> None:
        """Remove every definition and alias, and reset caches."""
        self._components.clear()
        self._aliases.clear()
        self._portal_slot_ids.clear()
        self._query_cache.clear()

    def icon_for_component(self, node: InstanceData, home_board_id: str = "") -> str:
        """Icon of an element in the layers tree.

        Home boards, icons, boards and symbols have fixed icons; other
        registered types use their definition's icon; anything else is a
        folder when it has children, or a generic element.
        """
        element_type = node.element_type
        if home_board_id and home_board_id == node.id:
            return LayerIcons.HOME
        if element_type == ElementEntitySubType.ICON:
            return LayerIcons.ICON
        if element_type == ElementEntitySubType.BOARD:
            return LayerIcons.BOARD
        if element_type == ElementEntitySubType.SYMBOL:
            return LayerIcons.COMPONENT

        if element_type != ElementEntitySubType.GENERIC and element_type in self._components:
            definition = self._components[element_type]
            if definition.icon:
                return definition.icon

        return LayerIcons.FOLDER if node.child_ids else LayerIcons.GENERIC_ELEMENT


default_registry = Registry()


def register_component(
    component_id: str,
    registry: Registry | None = None,
) -> Callable[[D], D]:
    """Class decorator registering a ComponentDefinition subclass.

    The class is instantiated with ``component_id`` and registered; the
    class itself is returned unchanged.

    Example:
        >>> @register_component("chip")
        ... class Chip(ComponentDefinition):
        ...     title: str | None = "Chip"
        ...     tag_name: str | None = "span"
    """
    target = registry if registry is not None else default_registry

    def decorator(definition_cls: D) -> D:
        target.register(definition_cls(id=component_id))
        return definition_cls

    return decorator
