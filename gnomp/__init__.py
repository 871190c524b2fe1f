"""
gnomp - GNOME desktop configuration backup and restore.

Captures the user-level GNOME setup into a single archive:
- dconf settings database
- Enabled shell extensions and their payloads
- Icon, theme and font directories
- GDM theme

and replays it on a fresh machine, re-downloading missing extensions
from extensions.gnome.org.
"""

__version__ = "0.1.0"
__author__ = "gnomp Contributors"
