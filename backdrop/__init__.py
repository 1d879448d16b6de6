"""
Backdrop: pins an application's pop-out window to the X11 desktop layer so
it behaves like a static wallpaper.
"""

__version__ = "0.1.0"
