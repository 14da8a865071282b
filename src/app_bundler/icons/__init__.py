"""Icon source catalog and container pipeline."""

from .catalog import IconCandidate, load_catalog
from .formats import PLATFORM_ICON_FORMATS, SLOT_TABLES, IconSlot
from .pipeline import IconPlan, PlannedSlot, plan_icons, render_icons

__all__ = [
    "IconCandidate",
    "IconPlan",
    "IconSlot",
    "PLATFORM_ICON_FORMATS",
    "PlannedSlot",
    "SLOT_TABLES",
    "load_catalog",
    "plan_icons",
    "render_icons",
]
