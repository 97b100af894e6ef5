# tuibridge/attributes.py
"""
Attribute/property bridge.

Attributes arrive from the reconciler as kebab-case names with string values.
The host wants snake_case properties with real Python types, and it packs the
text-style flags into a single `attributes` word. This module does that
translation in both directions.
"""

import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .engine import Renderable, TextAttributes

logger = logging.getLogger(__name__)


class PropertyKind(Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    FLAG = "flag"


# Attribute name -> host property name. Names not listed map to themselves.
ATTRIBUTE_NAMES: Dict[str, str] = {
    # base layout
    "id": "id",
    "width": "width",
    "height": "height",
    "min-width": "min_width",
    "min-height": "min_height",
    "max-width": "max_width",
    "max-height": "max_height",
    "visible": "visible",
    "opacity": "opacity",
    "buffered": "buffered",
    "live": "live",
    "enable-layout": "enable_layout",
    "selectable": "selectable",
    # flexbox
    "flex-direction": "flex_direction",
    "flex-grow": "flex_grow",
    "flex-shrink": "flex_shrink",
    "flex-wrap": "flex_wrap",
    "flex-basis": "flex_basis",
    "align-items": "align_items",
    "align-self": "align_self",
    "justify-content": "justify_content",
    # spacing
    "padding": "padding",
    "padding-top": "padding_top",
    "padding-bottom": "padding_bottom",
    "padding-left": "padding_left",
    "padding-right": "padding_right",
    "margin": "margin",
    "margin-top": "margin_top",
    "margin-bottom": "margin_bottom",
    "margin-left": "margin_left",
    "margin-right": "margin_right",
    "gap": "gap",
    "row-gap": "row_gap",
    "column-gap": "column_gap",
    # border
    "border-style": "border_style",
    "border-color": "border_color",
    # colours: text buffers use fg/bg, boxes use background_color
    "fg": "fg",
    "bg": "bg",
    "background-color": "background_color",
    "focused-background-color": "focused_background_color",
    "focused-text-color": "focused_text_color",
    "text-color": "text_color",
    "focused-border-color": "focused_border_color",
    "selection-bg": "selection_bg",
    "selection-fg": "selection_fg",
    "placeholder-color": "placeholder_color",
    "cursor-color": "cursor_color",
    "selected-background-color": "selected_background_color",
    "selected-text-color": "selected_text_color",
    "description-color": "description_color",
    "selected-description-color": "selected_description_color",
    "added-bg": "added_bg",
    "removed-bg": "removed_bg",
    "context-bg": "context_bg",
    "added-content-bg": "added_content_bg",
    "removed-content-bg": "removed_content_bg",
    "context-content-bg": "context_content_bg",
    "added-sign-color": "added_sign_color",
    "removed-sign-color": "removed_sign_color",
    "added-line-number-bg": "added_line_number_bg",
    "removed-line-number-bg": "removed_line_number_bg",
    "line-number-fg": "line_number_fg",
    "line-number-bg": "line_number_bg",
    "ascii-color": "color",
    # overflow / position
    "overflow": "overflow",
    "position": "position",
    "top": "top",
    "bottom": "bottom",
    "left": "left",
    "right": "right",
    "z-index": "z_index",
    # text styling
    "wrap-mode": "wrap_mode",
    "bold": "bold",
    "italic": "italic",
    "underline": "underline",
    "strikethrough": "strikethrough",
    "dim": "dim",
    "blink": "blink",
    "inverse": "inverse",
    "hidden-text": "hidden_text",
    "truncate": "truncate",
    # text / input
    "placeholder": "placeholder",
    "value": "value",
    "title": "title",
    "language": "language",
    "filetype": "language",
    "content": "content",
    "focusable": "focusable",
    # box
    "should-fill": "should_fill",
    "title-alignment": "title_alignment",
    # input / textarea
    "max-length": "max_length",
    "show-cursor": "show_cursor",
    "scroll-margin": "scroll_margin",
    "scroll-speed": "scroll_speed",
    # code / markdown
    "conceal": "conceal",
    "draw-unstyled-text": "draw_unstyled_text",
    "streaming": "streaming",
    # diff
    "view": "view",
    "show-line-numbers": "show_line_numbers",
    # select / tabselect
    "selected-index": "selected_index",
    "show-scroll-indicator": "show_scroll_indicator",
    "wrap-selection": "wrap_selection",
    "show-description": "show_description",
    "item-spacing": "item_spacing",
    "fast-scroll-step": "fast_scroll_step",
    "tab-width": "tab_width",
    "show-scroll-arrows": "show_scroll_arrows",
    "show-underline": "show_underline",
    # slider / asciifont / linenumber
    "orientation": "orientation",
    "ascii-text": "text",
    "font": "font",
    "line-number-offset": "line_number_offset",
    # scrollbox
    "sticky-scroll": "sticky_scroll",
    "sticky-start": "sticky_start",
    "viewport-culling": "viewport_culling",
}

TEXT_FLAGS: Dict[str, TextAttributes] = {
    "bold": TextAttributes.BOLD,
    "dim": TextAttributes.DIM,
    "italic": TextAttributes.ITALIC,
    "underline": TextAttributes.UNDERLINE,
    "blink": TextAttributes.BLINK,
    "inverse": TextAttributes.INVERSE,
    "strikethrough": TextAttributes.STRIKETHROUGH,
    "hidden_text": TextAttributes.HIDDEN,
}

_BOOL_PROPS = (
    "focusable", "visible", "buffered", "live", "enable_layout", "selectable",
    "should_fill", "truncate", "show_cursor", "conceal", "draw_unstyled_text",
    "streaming", "show_line_numbers", "show_scroll_indicator", "wrap_selection",
    "show_description", "show_scroll_arrows", "show_underline", "sticky_scroll",
    "viewport_culling",
)

# The layout engine rejects non-integer values for these.
_INT_PROPS = (
    "width", "height", "min_width", "max_width", "min_height", "max_height",
    "flex_grow", "flex_shrink",
    "padding", "padding_top", "padding_bottom", "padding_left", "padding_right",
    "margin", "margin_top", "margin_bottom", "margin_left", "margin_right",
    "gap", "row_gap", "column_gap",
    "top", "bottom", "left", "right", "z_index",
    "max_length", "scroll_margin", "scroll_speed",
    "selected_index", "item_spacing", "fast_scroll_step",
    "tab_width", "line_number_offset", "max_stat_samples",
)

_FLOAT_PROPS = ("opacity",)

# Known host properties and how their string values are typed. Anything not
# listed is an engine-specific passthrough and keeps the value it was given.
PROPERTY_KINDS: Dict[str, PropertyKind] = {
    **{name: PropertyKind.BOOL for name in _BOOL_PROPS},
    **{name: PropertyKind.INT for name in _INT_PROPS},
    **{name: PropertyKind.FLOAT for name in _FLOAT_PROPS},
    **{name: PropertyKind.FLAG for name in TEXT_FLAGS},
}

_INT_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?\d+\.?\d*$")

FRAMEBUFFER_HANDLER = "__fb_handler"


def property_name(name: str) -> str:
    return ATTRIBUTE_NAMES.get(name, name)


def coerce_value(prop: str, value: Any) -> Any:
    """Type a string attribute value for the host property `prop`."""
    if not isinstance(value, str):
        return value
    kind = PROPERTY_KINDS.get(prop)
    if kind is PropertyKind.BOOL:
        return value == "true"
    if kind is PropertyKind.INT and _INT_RE.match(value):
        return int(value)
    if kind is PropertyKind.FLOAT and _FLOAT_RE.match(value):
        return float(value)
    return value


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_attribute(node: Renderable, name: str) -> Optional[str]:
    """Return the attribute as a string, or None when it is not set."""
    prop = property_name(name)
    flag = TEXT_FLAGS.get(prop)
    if flag is not None:
        return "true" if (node.attributes or 0) & int(flag) else None
    value = node.get_property(prop)
    return _stringify(value) if value is not None else None


def set_attribute(node: Renderable, name: str, value: Any):
    prop = property_name(name)
    flag = TEXT_FLAGS.get(prop)
    if flag is not None:
        enabled = value is True or value == "true"
        current = node.attributes or 0
        node.attributes = (current | int(flag)) if enabled else (current & ~int(flag))
        return
    node.set_property(prop, coerce_value(prop, "" if value is None else value))


def remove_attribute(node: Renderable, name: str):
    prop = property_name(name)
    flag = TEXT_FLAGS.get(prop)
    if flag is not None:
        node.attributes = (node.attributes or 0) & ~int(flag)
        return
    node.set_property(prop, None)


def set_property(node: Renderable, name: str, value: Any, defer: Optional[Callable[[Callable[[], None]], Any]] = None):
    """
    Write a property verbatim. The frame-buffer handler is special: it is
    called with the node once the node is mounted, via `defer`.
    """
    if name == FRAMEBUFFER_HANDLER and callable(value):
        if defer is None:
            value(node)
        else:
            defer(lambda: value(node))
        return
    node.set_property(name, value)
