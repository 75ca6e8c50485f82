"""Template factory: a single-tag markup builder.

A TemplateFactory accumulates attributes, directives and child content for
one tag through a fluent interface, then serializes them with ``build()``.
The build mode decides which helpers contribute anything: live bindings are
only meaningful in Internal mode, literal values only in export modes.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from src.definition import BuildMode, CoerceValue
from src.instance import InstanceData, KeyValue, is_valid_attr
from src.stylesheet import class_name_from_props

from .expressions import (
    A11Y_INPUTS,
    ATTR_PREFIX,
    ATTRS,
    CD_A11Y_ATTRS_DIRECTIVE,
    CD_ATTRS_DIRECTIVE,
    CD_CO_TOOLTIP,
    CD_CO_TOOLTIP_POSITION,
    CD_HIDDEN_DIRECTIVE,
    CD_STYLE_CLASS_PREFIX_ATTR,
    CD_STYLE_DIRECTIVE,
    CHILD_ITERATOR,
    CLASS_ATTR,
    CLASS_PREFIX_PIPE,
    CSS_VAR_PIPE,
    CONDITIONAL_ATTR_PIPE,
    DATA_REFRESH_TRIGGER,
    DATASET_LOOKUP_PIPE,
    DEFAULT_MARKER_CONDITION,
    ELEMENT_ID,
    FIT_CONTENT_CLASS,
    FULL_ID_PATH_PIPE,
    HIDDEN_ATTR,
    NG_CONTAINER,
    NG_EVENT,
    NG_FOR,
    NG_IF,
    NG_SWITCH,
    NG_SWITCH_CASE,
    NG_SWITCH_DEFAULT,
    OUTLET_ANCESTORS,
    OUTLET_ELEMENT_CLASS_PREFIX,
    PREVIEW_STYLES_CLASS,
    RENDER_RECT_MARKER_CLASS,
    RENDERED_ELEMENT_CLASS,
    RESOURCE_URL_SAFE_PIPE,
    SHOW_PREVIEW_STYLES,
    STYLE_ATTR,
    STYLE_DIRECTIVE_ID,
    STYLE_MAP,
    TEMPLATE_FULL_ID_PATH_ATTR,
    TEMPLATE_ID_ATTR,
    TOOLTIP_LABEL_ATTR,
    TOOLTIP_POSITION_ATTR,
    build_ng_for,
    convert_attrs_to_string,
    generate_callback,
    generate_closing_tag,
    generate_output_callback,
    input_props_binding,
    input_props_binding_with_pipe,
    props_binding,
    wrap_in_brackets,
    wrap_in_curly_braces,
    wrap_in_parenthesis,
    wrap_in_single_quotes,
)


class TemplateFactory:
    """Builds the markup of one tag for a given build mode.

    Attributes are kept in insertion order; setting an existing key keeps
    its original position. Calling ``build()`` does not change the
    factory, so repeated builds return the same text.

    Example:
        >>> factory = TemplateFactory(BuildMode.SIMPLE, "button")
        >>> factory.add_attribute("type", "submit").add_child("Save").build()
        '<button type="submit">Save</button>'

    Attributes:
        mode: Build mode of this factory.
        tag_name: Tag emitted by ``build()``.
    """

    def __init__(
        self,
        mode: BuildMode | str,
        tag_name: str,
        instance: InstanceData | None = None,
    ):
        """Initialize the factory.

        In Simple mode the instance's raw attributes (and aria attributes)
        are added, together with the element's deterministic class name.

        Args:
            mode: Build mode, which decides what helpers contribute.
            tag_name: Element tag name.
            instance: Instance data of the element being exported.
        """
        self.mode = BuildMode(mode)
        self.tag_name = tag_name
        self._attrs: dict[str, Any] = {}
        self._directives: list[str] = []
        self._content = ""
        self._wrapper: TemplateFactory | None = None
        self._tag_name_binding = ""
        self._tag_names_bound: list[str] = []
        self._export_tag_name: str | None = None

        if self.mode is BuildMode.SIMPLE and instance is not None:
            self.add_instance_attributes(instance.attrs, instance.aria_attrs)
            if instance.id:
                self.add_css_class(class_name_from_props(instance))

    # =========================================================================
    # Mode
    # =========================================================================

    @property
    def is_internal(self) -> bool:
        """For an internally rendered template only."""
        return self.mode is BuildMode.INTERNAL

    @property
    def is_export(self) -> bool:
        """Either Simple or Application."""
        return not self.is_internal

    @property
    def is_simple(self) -> bool:
        return self.mode is BuildMode.SIMPLE

    @property
    def is_application(self) -> bool:
        return self.mode is BuildMode.APPLICATION

    def if_internal(self, callback: Callable[[TemplateFactory], Any]) -> TemplateFactory:
        """Run ``callback`` only in Internal mode."""
        if self.is_internal:
            callback(self)
        return self

    def if_export(self, callback: Callable[[TemplateFactory], Any]) -> TemplateFactory:
        """Run ``callback`` only in export modes."""
        if self.is_export:
            callback(self)
        return self

    # =========================================================================
    # Scaffolding
    # =========================================================================

    def add_default_attributes(
        self,
        data_id: bool = True,
        marker_condition: str = DEFAULT_MARKER_CONDITION,
    ) -> TemplateFactory:
        """Add the renderer hooks every top-level element carries.

        The render-rect marker class is applied when ``marker_condition``
        holds; by default when the element is not rendered inside a portal
        or symbol instance.
        """
        self.add_conditional_css_class(RENDER_RECT_MARKER_CLASS, marker_condition)
        self.add_css_class(RENDERED_ELEMENT_CLASS)

        if data_id:
            self.add_data_id_attribute()
            self.add_full_id_path_attribute()

        self.add_bound_attribute(CD_STYLE_DIRECTIVE, STYLE_MAP + wrap_in_brackets(ELEMENT_ID))
        self.add_bound_attribute(CD_STYLE_CLASS_PREFIX_ATTR, OUTLET_ELEMENT_CLASS_PREFIX)
        self.add_class_props_binding(PREVIEW_STYLES_CLASS, SHOW_PREVIEW_STYLES)
        self.add_props_bound_input_attribute(
            CD_HIDDEN_DIRECTIVE, HIDDEN_ATTR, True, CoerceValue.BOOLEAN
        )
        self.add_props_bound_input_attribute(CD_CO_TOOLTIP, TOOLTIP_LABEL_ATTR)
        self.add_props_bound_input_attribute(CD_CO_TOOLTIP_POSITION, TOOLTIP_POSITION_ATTR)
        self.add_props_bound_attribute(CD_ATTRS_DIRECTIVE, ATTRS)
        self.add_props_bound_attribute(CD_A11Y_ATTRS_DIRECTIVE, A11Y_INPUTS)
        return self

    def add_instance_attributes(
        self,
        attrs: Iterable[KeyValue] = (),
        aria_attrs: Iterable[KeyValue] = (),
    ) -> TemplateFactory:
        """Add entered attributes, skipping disabled, unnamed and empty ones."""
        for attr in [*attrs, *aria_attrs]:
            if not is_valid_attr(attr):
                continue
            self.add_attribute(attr.name, "" if attr.value is True else attr.value)
        return self

    def set_export_tag_name(self, export_tag_name: str) -> TemplateFactory:
        """Tag used instead of ``tag_name`` in export modes."""
        self._export_tag_name = export_tag_name
        return self

    def add_fit_content_class(self) -> TemplateFactory:
        """Size the element to its content, which also works with absolute positioning."""
        return self.add_css_class(FIT_CONTENT_CLASS)

    def add_style_directive_id(self, element_id: str = ELEMENT_ID) -> TemplateFactory:
        """Refresh a board's styles when the rendered board id changes."""
        return self.add_bound_attribute(STYLE_DIRECTIVE_ID, element_id)

    def add_data_id_attribute(self, element_id: str = ELEMENT_ID) -> TemplateFactory:
        return self.add_attr_bound_attribute(TEMPLATE_ID_ATTR, element_id)

    def add_full_id_path_attribute(self, element_id: str = ELEMENT_ID) -> TemplateFactory:
        """``[attr.data-full-id-path]``, e.g. board1-group1-element1 at render time."""
        value = f"{element_id} | {FULL_ID_PATH_PIPE} : {OUTLET_ANCESTORS}"
        return self.add_attr_bound_attribute(TEMPLATE_FULL_ID_PATH_ATTR, value)

    def add_element_class_prefix_binding(
        self,
        add_index_to_id: bool = False,
        slot_name: str | None = None,
    ) -> TemplateFactory:
        """``[elementClassPrefix]="elementId | classPrefixPipe : elementClassPrefix"``"""
        element_id = f"{ELEMENT_ID} + i" if add_index_to_id else ELEMENT_ID
        if slot_name:
            element_id += f" + '-{slot_name}'"
        value = f"{element_id} | {CLASS_PREFIX_PIPE} : {OUTLET_ELEMENT_CLASS_PREFIX}"
        return self.add_bound_attribute(OUTLET_ELEMENT_CLASS_PREFIX, value)

    def add_wrapper(self, wrapper: TemplateFactory) -> TemplateFactory:
        """Nest this factory's output inside ``wrapper`` when building."""
        self._wrapper = wrapper
        return self

    # =========================================================================
    # Structural directives
    # =========================================================================

    def add_if_condition_props(self, value: str, is_input: bool = False) -> TemplateFactory:
        """``*ngIf="props?.value"`` or ``*ngIf="props?.inputs?.value"``"""
        path = input_props_binding(value) if is_input else props_binding(value)
        return self.add_if(path)

    def add_if(self, expression: str) -> TemplateFactory:
        """Set the single ``*ngIf`` expression; a later call replaces it."""
        self._attrs[NG_IF] = expression
        return self

    def add_if_let(self, expression: str, let_name: str) -> TemplateFactory:
        return self.add_if(f"{expression}; let {let_name}")

    def add_if_else(self, expression: str, template_name: str) -> TemplateFactory:
        return self.add_if(f"{expression}; else {template_name}")

    def add_for(
        self,
        key: str,
        binding: str,
        index: bool = False,
        data_bindable: bool = False,
        coerce_type: CoerceValue | str | None = None,
        pipe: str | None = None,
    ) -> TemplateFactory:
        """Set the single ``*ngFor`` expression over an input; a later call replaces it."""
        if pipe:
            ref = input_props_binding_with_pipe(binding, pipe, data_bindable, coerce_type)
        else:
            ref = input_props_binding(binding, data_bindable, coerce_type)
        self._attrs[NG_FOR] = build_ng_for(key, ref, index)
        return self

    def add_props_bound_input_switch(self, value: str) -> TemplateFactory:
        """``[ngSwitch]="props?.inputs?.value"``"""
        return self.add_props_bound_input_attribute(NG_SWITCH, value)

    def add_switch_case(self, value: str) -> TemplateFactory:
        """``*ngSwitchCase="value"``"""
        self._attrs[NG_SWITCH_CASE] = value
        return self

    def add_switch_default(self) -> TemplateFactory:
        return self.add_directive(NG_SWITCH_DEFAULT)

    def add_tag_bound_input_switch(self, binding: str, tag_names: Iterable[str]) -> TemplateFactory:
        """Render one switch case per tag name, selected by an input."""
        self._tag_name_binding = binding
        self._tag_names_bound = [str(tag) for tag in tag_names]
        return self

    def add_directive(self, directive: str) -> TemplateFactory:
        self._directives.append(directive)
        return self

    # =========================================================================
    # CSS classes and styles
    # =========================================================================

    def add_css_class(self, class_name: str) -> TemplateFactory:
        """Append a class to the ``class`` attribute."""
        current = self._attrs.get(CLASS_ATTR)
        self._attrs[CLASS_ATTR] = f"{current} {class_name}" if current else class_name
        return self

    def add_conditional_css_class(self, class_name: str, condition: str) -> TemplateFactory:
        """``[class.className]="condition"``"""
        return self.add_bound_attribute(f"{CLASS_ATTR}.{class_name}", condition)

    def add_class_props_binding(
        self,
        class_name: str,
        binding: str,
        is_input: bool = False,
        data_bindable: bool = False,
        coerce_type: CoerceValue | str | None = None,
    ) -> TemplateFactory:
        """``[class.className]="props?.binding"`` or ``"props?.inputs?.binding"``"""
        return self.add_props_bound_attribute(
            f"{CLASS_ATTR}.{class_name}", binding, is_input, data_bindable, coerce_type
        )

    def add_css_var(
        self,
        var_name: str,
        value: str,
        quote_for_content: bool = False,
    ) -> TemplateFactory:
        """``[style.--var]="'value'"``

        With ``quote_for_content`` the value keeps its quotes once resolved,
        as needed by the ``content`` property of pseudo elements.
        """
        key = wrap_in_brackets(f"{STYLE_ATTR}.{var_name}")
        quoted = f"\"'{value}'\"" if quote_for_content else wrap_in_single_quotes(value)
        return self.add_attribute(key, quoted)

    def add_css_var_input_binding(
        self,
        var_name: str,
        input_name: str | None = None,
    ) -> TemplateFactory:
        """``[style.--var]="props?.inputs['--var'] | cssVarPipe"``"""
        key = wrap_in_brackets(f"{STYLE_ATTR}.{var_name}")
        value = input_props_binding_with_pipe(input_name or var_name, CSS_VAR_PIPE)
        return self.add_attribute(key, value)

    # =========================================================================
    # Attributes
    # =========================================================================

    def add_attribute(self, key: str, value: Any, add_if_undefined: bool = True) -> TemplateFactory:
        """``key="value"``"""
        if not add_if_undefined and not value:
            return self
        self._attrs[key] = value
        return self

    def add_boolean_attribute(self, key: str, value: bool | None) -> TemplateFactory:
        """Add a bare attribute only when ``value`` is True."""
        if value is True:
            self.add_attribute(key, "")
        return self

    def add_attr_bound_attribute(self, binding: str, value: str) -> TemplateFactory:
        """``[attr.binding]="value"``"""
        return self.add_bound_attribute(f"{ATTR_PREFIX}.{binding}", value)

    def add_attr_bound_input_attribute(
        self,
        binding: str,
        value: str,
        data_bindable: bool = False,
        coerce_type: CoerceValue | str | None = None,
    ) -> TemplateFactory:
        """``[attr.binding]="props?.inputs?.value | conditionalAttrPipe"``

        The pipe drops the attribute at render time when the input is
        false, null or undefined.
        """
        ref = input_props_binding(value, data_bindable, coerce_type)
        return self.add_bound_attribute(
            f"{ATTR_PREFIX}.{binding}", f"{ref} | {CONDITIONAL_ATTR_PIPE}"
        )

    def add_bound_attribute(self, binding: str, value: str | None = None) -> TemplateFactory:
        """``[binding]="value"``, the value defaulting to the binding name."""
        self._attrs[wrap_in_brackets(binding)] = value or binding
        return self

    def add_props_bound_attribute(
        self,
        binding: str,
        value: str | None = None,
        is_input: bool = False,
        data_bindable: bool = False,
        coerce_type: CoerceValue | str | None = None,
    ) -> TemplateFactory:
        """``[binding]="props?.value"`` or ``[binding]="props?.inputs?.value"``"""
        ref = value or binding
        if is_input:
            path = input_props_binding(ref, data_bindable, coerce_type)
        else:
            path = props_binding(ref)
        self._attrs[wrap_in_brackets(binding)] = path
        return self

    def add_props_bound_input_attribute(
        self,
        binding: str,
        value: str | None = None,
        data_bindable: bool = False,
        coerce_type: CoerceValue | str | None = None,
    ) -> TemplateFactory:
        """``[binding]="props?.inputs?.value"``"""
        return self.add_props_bound_attribute(binding, value, True, data_bindable, coerce_type)

    def add_props_bound_input_attributes(self, bindings: Iterable[str]) -> TemplateFactory:
        for binding in bindings:
            self.add_props_bound_input_attribute(binding)
        return self

    def add_props_bound_dataset_lookup(self, binding: str, value: str) -> TemplateFactory:
        """``[binding]="props?.inputs?.value | datasetLookupPipe:dataBindingRefreshTrigger"``"""
        lookup = f"{input_props_binding(value)} | {DATASET_LOOKUP_PIPE}:{DATA_REFRESH_TRIGGER}"
        return self.add_bound_attribute(binding, lookup)

    def add_safe_props_bound_resource_attribute(
        self,
        binding: str,
        value: str | None = None,
        is_input: bool = True,
    ) -> TemplateFactory:
        """``[binding]="props?.inputs?.value | safeResourceURL"``"""
        ref = value or binding
        path = input_props_binding(ref) if is_input else props_binding(ref)
        self._attrs[wrap_in_brackets(binding)] = f"{path} | {RESOURCE_URL_SAFE_PIPE}"
        return self

    # =========================================================================
    # Events
    # =========================================================================

    def add_handler(self, event_name: str, callback_name: str) -> TemplateFactory:
        """``(event)="callback($event)"``"""
        return self.add_attribute(wrap_in_parenthesis(event_name), generate_callback(callback_name))

    def add_output_binding(
        self,
        event_binding: str,
        input_binding: str,
        event_key: str | None = None,
        write_value: bool = True,
    ) -> TemplateFactory:
        """Route an event back to an input of the element.

        ``(change)="onOutputChange($event.checked,elementId,'checked')"``

        Args:
            event_binding: Event name (change, clicked, ...).
            input_binding: Input updated by the event.
            event_key: Path extracted from the event payload.
            write_value: When False the event is dispatched without
                updating the input.
        """
        event = NG_EVENT + (f".{event_key}" if event_key else "")
        callback = generate_output_callback(event, input_binding, write_value)
        return self.add_attribute(wrap_in_parenthesis(event_binding), callback)

    def add_output_event(self, event_binding: str, value: str, input_binding: str) -> TemplateFactory:
        """Dispatch an event that never writes to the element's inputs."""
        callback = generate_output_callback(value, input_binding, False)
        return self.add_attribute(wrap_in_parenthesis(event_binding), callback)

    def add_output_event_empty(self, event_binding: str) -> TemplateFactory:
        return self.add_output_binding(event_binding, event_binding, None, False)

    # =========================================================================
    # Content
    # =========================================================================

    def add_child(self, content: Any = None) -> TemplateFactory:
        """Append child markup; empty content is ignored."""
        if content is None or content == "":
            return self
        self._content += str(content)
        return self

    def add_inner_text_binding(
        self,
        value: str,
        is_input: bool = True,
        data_bindable: bool = False,
        coerce_type: CoerceValue | str | None = None,
    ) -> TemplateFactory:
        """``<div>{{ props?.inputs?.value }}</div>``"""
        if is_input:
            binding = input_props_binding(value, data_bindable, coerce_type)
        else:
            binding = props_binding(value)
        return self.add_child(wrap_in_curly_braces(binding))

    def allow_children(self, condition: bool = True) -> TemplateFactory:
        """Render declared child ids through the catalog's child iterator (Internal only)."""
        if not condition or not self.is_internal:
            return self
        self._content += CHILD_ITERATOR
        return self

    # =========================================================================
    # Build
    # =========================================================================

    def build(self) -> str:
        """Serialize the factory to markup.

        A registered tag-name switch produces a switch block with one case
        per candidate tag; otherwise a single tag is emitted.
        """
        if self._tag_names_bound:
            return self._build_tag_switch()
        return self._build_tag(self._resolved_tag_name(), self._attrs)

    def _resolved_tag_name(self) -> str:
        if self.is_export and self._export_tag_name:
            return self._export_tag_name
        return self.tag_name

    def _render_with_content(self, extra_content: str) -> str:
        """Build as if ``extra_content`` had been appended, leaving the factory unchanged."""
        return self._build_tag(self._resolved_tag_name(), self._attrs, extra_content)

    def _build_tag(self, tag_name: str, attrs: dict[str, Any], extra_content: str = "") -> str:
        parts = [tag_name, *self._directives]
        attributes = convert_attrs_to_string(attrs)
        if attributes:
            parts.append(attributes)

        opening_tag = f"<{' '.join(parts)}>"
        output = opening_tag + self._content + extra_content + generate_closing_tag(tag_name)

        if self._wrapper is not None:
            output = self._wrapper._render_with_content(output)
        return output

    def _build_tag_switch(self) -> str:
        container = TemplateFactory(self.mode, NG_CONTAINER)
        container.add_props_bound_input_switch(self._tag_name_binding)
        for tag_name in self._tag_names_bound:
            attrs = dict(self._attrs)
            attrs[NG_SWITCH_CASE] = wrap_in_single_quotes(tag_name)
            container.add_child(self._build_tag(tag_name, attrs))
        return container.build()


__all__ = ["TemplateFactory"]
