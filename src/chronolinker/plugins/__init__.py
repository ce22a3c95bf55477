"""Extension layer — store change hooks via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from chronolinker.plugins.event_bus import EventBus
from chronolinker.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager"]
