"""Screens of the vault shell, persisted as the current view."""

from enum import Enum


class View(str, Enum):
    """Selectable vault screens."""

    DASHBOARD = "DASHBOARD"
    VAULT = "VAULT"
    COPILOT = "COPILOT"
    GRAPH = "GRAPH"
    SMART_LOOKUP = "SMART_LOOKUP"
    RESEARCH_LAB = "RESEARCH_LAB"
    WEB_IMPORT = "WEB_IMPORT"
    STUDIO = "STUDIO"

    @classmethod
    def parse(cls, value: object, default: "View | None" = None) -> "View":
        """
        Resolve a stored value to a View.

        Args:
            value: Raw stored value
            default: Fallback for missing or unknown values (DASHBOARD if None)

        Returns:
            Matching View member or the fallback
        """
        fallback = default or cls.DASHBOARD
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return fallback
        try:
            return cls(value)
        except ValueError:
            return fallback
