"""
Output of the dotfile generators.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A dotfile to be written verbatim.

    ``path`` is relative to the home directory; ``reason`` is a short
    description of what the file configures.
    """

    path: str
    content: str
    reason: str = ""
