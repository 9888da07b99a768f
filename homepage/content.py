"""Collapse/expand toggle for the page content behind the map figure."""

from __future__ import annotations

from homepage.page import Page

COLLAPSED_CLASS = "content-collapsed"
SELECTED_CLASS = "is-selected"


def is_collapsed(page: Page) -> bool:
    return page.body.has_class(COLLAPSED_CLASS)


def toggle_content(page: Page) -> bool:
    """
    Flip the collapsed state and mirror it on the reveal region.

    Returns the new collapsed value.
    """
    was_collapsed = is_collapsed(page)
    page.body.toggle_class(COLLAPSED_CLASS, not was_collapsed)
    if page.map_reveal is not None:
        # expanded after the flip exactly when it was collapsed before
        page.map_reveal.set_attribute("aria-expanded", "true" if was_collapsed else "false")
        page.map_reveal.toggle_class(SELECTED_CLASS, was_collapsed)
    return not was_collapsed
