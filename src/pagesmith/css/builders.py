"""
CSS rule builders per component kind.

Every kind maps to exactly one builder in ``BUILDERS``:

- containers: layout rules (display, flex, grid, sizing, spacing, border,
  shadow, background)
- typography: layout rules plus text rules and a responsive font size
- interactive: base rules plus a ``:hover`` block when a hover prop is set

Props that are absent emit nothing.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pagesmith.css import rules as fmt
from pagesmith.css.colors import resolve_color, resolve_style_value
from pagesmith.css.responsive import Breakpoint, any_breakpoint, is_responsive
from pagesmith.css.rules import RuleSet
from pagesmith.specs.component import ComponentKind
from pagesmith.themes.resolver import TokenResolver


@dataclass(frozen=True)
class StyleContext:
    """One component as seen by a builder."""

    kind: ComponentKind
    class_name: str
    props: Mapping[str, Any]
    resolver: TokenResolver

    def get(self, key: str) -> Any:
        return self.props.get(key)

    def color(self, value: Any) -> str | None:
        return resolve_color(value, self.resolver, self.kind)

    def style(self, value: Any) -> str | None:
        return resolve_style_value(value, self.resolver)


RuleBuilder = Callable[[StyleContext], RuleSet]

_JUSTIFY = {
    "start": "flex-start",
    "end": "flex-end",
    "center": "center",
    "between": "space-between",
    "around": "space-around",
    "evenly": "space-evenly",
}
_FLEX_ALIGN = {
    "start": "flex-start",
    "end": "flex-end",
    "center": "center",
    "stretch": "stretch",
    "baseline": "baseline",
}
_FLEX_DISPLAYS = frozenset({"flex", "inline-flex"})
_GRID_DISPLAYS = frozenset({"grid", "inline-grid"})


def _mapped(mapping: dict[str, str]) -> fmt.Formatter:
    def format_value(value: Any) -> str | None:
        text = fmt.plain(value)
        return mapping.get(text, text) if text else None

    return format_value


def _skip(default: str) -> fmt.Formatter:
    def format_value(value: Any) -> str | None:
        text = fmt.plain(value)
        return None if text == default else text

    return format_value


# =============================================================================
# Rule groups
# =============================================================================


def layout_rules(rules: RuleSet, ctx: StyleContext) -> None:
    display = ctx.get("display")
    rules.responsive("display", display, fmt.plain)

    if any_breakpoint(display, lambda v: v in _FLEX_DISPLAYS):
        rules.responsive("flex-direction", ctx.get("direction"), fmt.plain)
        rules.responsive("justify-content", ctx.get("justify"), _mapped(_JUSTIFY))
        rules.responsive("align-items", ctx.get("align"), _mapped(_FLEX_ALIGN))
        rules.responsive("flex-wrap", ctx.get("wrap"), fmt.plain)
        rules.responsive("gap", ctx.get("flexGap"), fmt.length)

    if any_breakpoint(display, lambda v: v in _GRID_DISPLAYS):
        rules.responsive("grid-template-columns", ctx.get("numColumns"), fmt.grid_columns)
        rules.responsive("gap", ctx.get("gridGap"), fmt.grid_gap)
        rules.responsive("align-items", ctx.get("alignItems"), fmt.plain)

    rules.responsive("position", ctx.get("position"), fmt.position)
    rules.responsive("z-index", ctx.get("zIndex"), fmt.plain)
    rules.responsive("opacity", ctx.get("opacity"), fmt.opacity)
    rules.responsive("overflow", ctx.get("overflow"), fmt.overflow)
    _aspect_ratio(rules, ctx)
    _visibility(rules, ctx.get("visibility"))

    rules.responsive("width", ctx.get("width"), fmt.length)
    rules.responsive("height", ctx.get("height"), fmt.length)
    rules.responsive("min-width", ctx.get("minWidth"), fmt.length)
    rules.responsive("max-width", ctx.get("maxWidth"), fmt.length)
    rules.responsive("min-height", ctx.get("minHeight"), fmt.length)
    rules.responsive("max-height", ctx.get("maxHeight"), fmt.length)
    rules.responsive("padding", ctx.get("padding"), fmt.spacing)
    rules.responsive("margin", ctx.get("margin"), fmt.spacing)

    rules.responsive("object-fit", ctx.get("objectFit"), _skip("cover"))
    rules.responsive("object-position", ctx.get("objectPosition"), _skip("center"))

    for prop, value in fmt.border(ctx.get("border"), ctx.resolver):
        rules.declare(prop, value)
    rules.responsive("border-radius", ctx.get("borderRadius"), fmt.border_radius)
    rules.declare("box-shadow", fmt.shadow(ctx.get("shadow"), ctx.resolver))

    rules.responsive("background-color", ctx.get("backgroundColor"), ctx.color)
    image = fmt.plain(ctx.get("backgroundImage"))
    if image:
        rules.declare("background-image", f"url({image})")
        rules.declare("background-size", fmt.plain(ctx.get("backgroundSize")) or "cover")
        rules.declare("background-position", fmt.plain(ctx.get("backgroundPosition")) or "center")
        rules.declare("background-repeat", fmt.plain(ctx.get("backgroundRepeat")) or "no-repeat")


def text_rules(rules: RuleSet, ctx: StyleContext) -> None:
    align = ctx.get("align") if ctx.get("align") is not None else ctx.get("textAlign")
    rules.responsive("text-align", align, fmt.plain)
    rules.responsive("color", ctx.get("color"), ctx.color)
    rules.responsive("font-weight", ctx.get("fontWeight"), ctx.style)
    rules.responsive("text-transform", ctx.get("textTransform"), _skip("none"))

    decoration = fmt.plain(ctx.get("textDecoration"))
    if decoration and decoration != "none":
        rules.declare("text-decoration", decoration)
        rules.declare("text-decoration-style", fmt.plain(ctx.get("textDecorationStyle")))

    rules.declare("cursor", fmt.plain(ctx.get("cursor")))
    rules.declare("transition", _transition(ctx.get("transition")))
    rules.responsive("line-height", ctx.get("lineHeight"), fmt.unit_value)
    rules.responsive("letter-spacing", ctx.get("letterSpacing"), fmt.unit_value)
    _font_size(rules, ctx)


def hover_rules(rules: RuleSet, ctx: StyleContext) -> None:
    """``:hover`` block, emitted only when a hover prop is set."""
    text_color = ctx.get("hoverTextColor")
    if text_color is None:
        text_color = ctx.get("hoverColor")
    rules.declare("background-color", ctx.color(ctx.get("hoverBackgroundColor")), pseudo=":hover", important=True)
    rules.declare("color", ctx.color(text_color), pseudo=":hover", important=True)
    rules.declare("opacity", fmt.plain(ctx.get("hoverOpacity")), pseudo=":hover", important=True)
    rules.declare("transform", fmt.plain(ctx.get("hoverTransform")), pseudo=":hover")


def _font_size(rules: RuleSet, ctx: StyleContext) -> None:
    def format_size(value: Any) -> str | None:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return f"{value}px"
        return ctx.style(value)

    rules.responsive("font-size", ctx.get("fontSize"), format_size)


def _aspect_ratio(rules: RuleSet, ctx: StyleContext) -> None:
    ratio = fmt.plain(ctx.get("aspectRatio"))
    if not ratio or ratio == "auto":
        return
    if ratio == "custom":
        ratio = fmt.plain(ctx.get("aspectRatioCustom"))
    rules.declare("aspect-ratio", ratio)


def _visibility(rules: RuleSet, value: Any) -> None:
    """
    Hide or re-show per breakpoint.

    Emits only where the effective visibility changes from the smaller
    breakpoint; nothing when visible everywhere.
    """
    if value is None:
        return
    if not is_responsive(value):
        value = {Breakpoint.MOBILE.value: value}

    mobile = value.get("mobile")
    tablet = value.get("tablet")
    desktop = value.get("desktop")
    effective_tablet = tablet if tablet is not None else mobile
    effective_desktop = desktop if desktop is not None else effective_tablet
    if "hidden" not in (mobile, effective_tablet, effective_desktop):
        return

    if mobile == "hidden":
        rules.declare("display", "none")
    if tablet is not None and tablet != mobile:
        rules.declare("display", _shown(tablet), breakpoint=Breakpoint.TABLET)
    if desktop is not None and desktop != effective_tablet:
        rules.declare("display", _shown(desktop), breakpoint=Breakpoint.DESKTOP)


def _shown(visibility: Any) -> str:
    return "none" if visibility == "hidden" else "revert"


def _transition(value: Any) -> str | None:
    if isinstance(value, Mapping):
        properties = value.get("properties") or "all"
        duration = value.get("duration") or "300ms"
        easing = value.get("easing") or "ease"
        return f"{properties} {duration} {easing}"
    return fmt.plain(value)


# =============================================================================
# Builders
# =============================================================================


def build_container(ctx: StyleContext) -> RuleSet:
    rules = RuleSet(ctx.class_name)
    layout_rules(rules, ctx)
    return rules


def build_typography(ctx: StyleContext) -> RuleSet:
    rules = RuleSet(ctx.class_name)
    layout_rules(rules, ctx)
    text_rules(rules, ctx)
    return rules


def build_button(ctx: StyleContext) -> RuleSet:
    rules = RuleSet(ctx.class_name)
    layout_rules(rules, ctx)
    rules.responsive("color", ctx.get("textColor"), ctx.color)
    hover_rules(rules, ctx)
    return rules


def build_link(ctx: StyleContext) -> RuleSet:
    rules = build_typography(ctx)
    hover_rules(rules, ctx)
    return rules


def build_navigation(ctx: StyleContext) -> RuleSet:
    rules = RuleSet(ctx.class_name)
    layout_rules(rules, ctx)
    rules.responsive("color", ctx.get("textColor"), ctx.color)
    _font_size(rules, ctx)
    return rules


BUILDERS: dict[ComponentKind, RuleBuilder] = {
    ComponentKind.BOX: build_container,
    ComponentKind.CARD: build_container,
    ComponentKind.IMAGE: build_container,
    ComponentKind.ICON: build_container,
    ComponentKind.NAVIGATION: build_navigation,
    ComponentKind.FORM: build_container,
    ComponentKind.TEXT_INPUT: build_container,
    ComponentKind.TEXTAREA: build_container,
    ComponentKind.SELECT: build_container,
    ComponentKind.RADIO_GROUP: build_container,
    ComponentKind.CHECKBOX: build_container,
    ComponentKind.SUBMIT_BUTTON: build_container,
    ComponentKind.BUTTON: build_button,
    ComponentKind.HEADING: build_typography,
    ComponentKind.TEXT: build_typography,
    ComponentKind.LINK: build_link,
    ComponentKind.RICH_TEXT: build_typography,
}

_unmapped = set(ComponentKind) - set(BUILDERS)
if _unmapped:
    raise RuntimeError(f"No CSS builder for component kinds: {sorted(_unmapped)}")
