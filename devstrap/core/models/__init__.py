"""
Domain models — Pydantic types for the bootstrap run.

All models are re-exported here for convenient access:

    from devstrap.core.models import Action, Receipt, OSProfile, BootstrapConfig
"""

from devstrap.core.models.action import Action, Receipt
from devstrap.core.models.profile import (
    BootstrapConfig,
    HostEnvironment,
    OSProfile,
    OSTag,
    PackageManager,
)
from devstrap.core.models.template import GeneratedFile

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # profile.py
    "BootstrapConfig",
    "HostEnvironment",
    "OSProfile",
    "OSTag",
    "PackageManager",
    # template.py
    "GeneratedFile",
]
