"""
In-memory stand-in for the page elements the front end touches.

Only the surface the controllers need is modelled: a class set, attributes,
text content, inline style properties and children. Element lookup by role
happens once, when the Page is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class Element:
    tag: str = "div"
    classes: set[str] = field(default_factory=set)
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ""
    style: dict[str, str] = field(default_factory=dict)
    children: list[Element] = field(default_factory=list)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def toggle_class(self, name: str, force: bool | None = None) -> bool:
        """
        Add or remove a class; `force` pins the outcome like classList.toggle.

        Returns whether the class is present afterwards.
        """
        present = (name not in self.classes) if force is None else force
        if present:
            self.classes.add(name)
        else:
            self.classes.discard(name)
        return present

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def set_vars(self, props: dict[str, str]) -> None:
        self.style.update(props)

    def append(self, child: Element) -> Element:
        self.children.append(child)
        return child

    def clear_children(self) -> None:
        self.children.clear()


@dataclass(eq=False)
class Page:
    body: Element
    theme_toggle: Element
    moon_switch: Element
    starfield: Element
    map_shell: Element
    year: Element
    # optional pieces; features depending on them become no-ops when absent
    map_reveal: Element | None = None
    grid_image: Element | None = None
    map_fallback: Element | None = None
    width: int = 1280
    height: int = 800


def build_page(
    ascii_text: str | None = "",
    *,
    width: int = 1280,
    height: int = 800,
    dark: bool = False,
    moon_pressed: str | None = "false",
    with_reveal: bool = True,
    with_image: bool = True,
) -> Page:
    """
    Build the standard page layout.

    `ascii_text=None` omits the fallback element so the typewriter stays idle.
    """
    body = Element("body", classes={"dark"} if dark else set())
    moon = Element("button", classes={"moon-switch"})
    if moon_pressed is not None:
        moon.set_attribute("aria-pressed", moon_pressed)
    map_reveal = None
    if with_reveal:
        map_reveal = Element("figure", classes={"page-figure"}, attributes={"aria-expanded": "true"})
    grid_image = Element("img") if with_image else None
    if map_reveal is not None and grid_image is not None:
        map_reveal.append(grid_image)
    fallback = None
    if ascii_text is not None:
        fallback = Element("pre", classes={"map-fallback"}, text=ascii_text)
    return Page(
        body=body,
        theme_toggle=Element(
            "button",
            classes={"theme-toggle"},
            attributes={"aria-pressed": "true" if dark else "false"},
        ),
        moon_switch=moon,
        starfield=Element("div", classes={"starfield"}),
        map_shell=Element("div", classes={"map-shell"}),
        year=Element("span"),
        map_reveal=map_reveal,
        grid_image=grid_image,
        map_fallback=fallback,
        width=width,
        height=height,
    )
