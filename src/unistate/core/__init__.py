"""Core package initializer for unistate.

Downstream code imports from the submodules directly:
    from unistate.core.settings import settings, load_settings, Settings, get_logger
    from unistate.core.store import Store, ActionDescriptor
"""

from __future__ import annotations

__all__ = ["__doc__"]
