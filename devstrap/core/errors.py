"""
Bootstrap errors — the two tiers of failure.

Anything raised from here is fatal: the orchestrator stops at the
first one and reports it.  Best-effort failures never become
exceptions; they are collected as warnings on the report.
"""

from __future__ import annotations

from devstrap.core.models.action import Action, Receipt


class BootstrapError(Exception):
    """Base class for fatal bootstrap failures."""


class UnsupportedPlatformError(BootstrapError):
    """Raised when the platform tag is neither Linux nor macOS."""

    def __init__(self, platform: str):
        super().__init__(f"Unsupported OS: {platform}")
        self.platform = platform


class PrivilegedUserError(BootstrapError):
    """Raised when the bootstrap is started as root."""

    def __init__(self) -> None:
        super().__init__("Do not run as root")


class StepFailed(BootstrapError):
    """A required (non best-effort) action failed."""

    def __init__(self, action: Action, receipt: Receipt):
        label = action.name or action.id
        super().__init__(f"{label} failed: {receipt.error or 'unknown error'}")
        self.action = action
        self.receipt = receipt
