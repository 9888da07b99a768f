"""
Offline renderer for the US transmission grid SVG.

Independent of the `homepage` package; its output seeds one of the grid
images the site preloads.
"""
