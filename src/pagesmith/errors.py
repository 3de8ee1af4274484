"""
Error types for Pagesmith compilation, CSS generation and publishing.
"""

from dataclasses import dataclass
from typing import Optional


class PagesmithError(Exception):
    """Base exception for all Pagesmith errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class ConfigurationGap(PagesmithError):
    """
    Raised when site configuration is incomplete.

    Never fatal to a compile or a CSS build; callers log it and fall back.

    Examples:
    - No active theme for the site
    - Navigation missing or unpublished
    - Settings not initialized
    - Alias chain deeper than the resolver allows
    """

    pass


class SettingsUnavailable(ConfigurationGap):
    """Raised by a settings store when a site's settings cannot be read."""

    pass


class ValidationFailure(PagesmithError):
    """
    Raised when an operation's preconditions are not met.

    Examples:
    - Publishing a theme with missing required sections
    - Saving a section under an unknown name
    """

    pass


class MissingSectionsError(ValidationFailure):
    """Raised when a theme cannot be published because sections are missing."""

    def __init__(self, theme_id: int | str, missing: list[str]):
        self.theme_id = theme_id
        self.missing = list(missing)
        super().__init__(
            "Missing required sections: " + ", ".join(self.missing),
            ErrorContext(theme_id=theme_id),
        )


class InvalidSectionError(ValidationFailure):
    """Raised when a section name does not follow the naming convention."""

    pass


class StorageError(PagesmithError):
    """Raised when blob storage fails to read or write."""

    pass


class TraversalAnomaly(PagesmithError):
    """
    Raised for a single malformed node while walking a component tree.

    Examples:
    - Node is not an object
    - ``props`` is not a mapping
    - Unrecognized component ``type``
    """

    pass


class ThemeNotFoundError(PagesmithError):
    """Raised when a theme id is not present in the theme store."""

    pass


@dataclass
class ErrorContext:
    """
    Where an error happened.

    Attributes:
        site_id: Site scope (None for the central site)
        theme_id: Theme the operation targeted
        node_id: Component node id inside a tree
        section: CSS section name
    """

    site_id: str | None = None
    theme_id: int | str | None = None
    node_id: str | None = None
    section: str | None = None

    def format(self) -> str:
        """
        Format context as a compact string.

        Returns:
            String like: "theme=3 section=footer"
        """
        parts = []
        if self.site_id is not None:
            parts.append(f"site={self.site_id}")
        if self.theme_id is not None:
            parts.append(f"theme={self.theme_id}")
        if self.node_id is not None:
            parts.append(f"node={self.node_id}")
        if self.section is not None:
            parts.append(f"section={self.section}")
        return " ".join(parts) or "pagesmith"


def make_traversal_anomaly(message: str, node_id: str | None = None) -> TraversalAnomaly:
    """
    Helper to create a TraversalAnomaly with node context.

    Args:
        message: Error description
        node_id: Optional id of the offending node

    Returns:
        TraversalAnomaly with context attached when an id is known
    """
    if node_id is not None:
        return TraversalAnomaly(message, ErrorContext(node_id=node_id))
    return TraversalAnomaly(message)
