"""CRML Exceptions

Custom exceptions raised by the template compiler and its collaborators.
"""

from __future__ import annotations


class CrmlError(Exception):
    """Base exception for all CRML errors."""

    pass


class TemplateNotFoundError(CrmlError, FileNotFoundError):
    """Raised when a template name cannot be resolved to source text."""

    def __init__(self, name: str, path: str | None = None):
        self.name = name
        self.path = path
        where = f" (resolved to {path})" if path else ""
        super().__init__(f"Template not found: {name}{where}")


class SlotNotFoundError(CrmlError):
    """Raised when an included template has no matching slot marker."""

    def __init__(self, template: str, slot: str):
        self.template = template
        self.slot = slot
        super().__init__(f"Slot '{slot}' not found in template: {template}")


class IncludeCycleError(CrmlError):
    """Raised when a template (indirectly) includes itself."""

    def __init__(self, chain: list[str]):
        self.chain = list(chain)
        super().__init__(f"Include cycle: {' -> '.join(self.chain)}")


class IncludeDepthError(CrmlError):
    """Raised when an include chain is deeper than the compiler allows."""

    def __init__(self, chain: list[str], max_depth: int):
        self.chain = list(chain)
        self.max_depth = max_depth
        super().__init__(
            f"Include depth exceeds {max_depth}: {' -> '.join(self.chain)}"
        )


class UnknownDialectError(CrmlError):
    """Raised when no renderer exists for the requested output dialect."""

    def __init__(self, dialect: str):
        self.dialect = dialect
        super().__init__(f"Unknown dialect: {dialect}")


class ConfigError(CrmlError):
    """Raised when a crml config file is missing or invalid."""

    pass
