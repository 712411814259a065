"""
Post-install notes shown at the end of a successful run.
"""

from __future__ import annotations

from devstrap.core.models.profile import OSProfile, OSTag


def post_install_notes(profile: OSProfile) -> list[str]:
    """Numbered follow-up actions for the user."""
    notes = [
        "Restart your terminal or run: exec zsh",
        "To configure the Powerlevel10k theme: p10k configure",
    ]
    if profile.tag is OSTag.AL2023:
        notes += [
            "You may need to log out and back in for Docker to work",
            "Check that docker works: docker --version",
        ]
    return [f"{i}. {note}" for i, note in enumerate(notes, start=1)]


def closing_warnings(profile: OSProfile) -> list[str]:
    where = profile.pretty_name or profile.tag.value
    return [
        f"Note: some modern tools (exa, bat, etc.) may not be available on {where}",
        "They were installed where possible; the shell config falls back to the standard commands",
    ]
