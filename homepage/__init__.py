"""
Front-end core for the personal site: typewriter reveal, image preloading,
theme/blackout modes, the blackout starfield and the content toggle.
"""

from homepage.config import SiteConfig, load_config
from homepage.events import Event, dispatch
from homepage.page import Element, Page, build_page
from homepage.session import Session, start_session

__all__ = [
    "Element",
    "Event",
    "Page",
    "Session",
    "SiteConfig",
    "build_page",
    "dispatch",
    "load_config",
    "start_session",
]
