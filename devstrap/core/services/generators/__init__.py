"""Dotfile generators — deterministic file contents for the home directory."""

from devstrap.core.services.generators.vimrc import generate_vimrc
from devstrap.core.services.generators.zshrc import generate_zshrc

GENERATORS = {
    "zshrc": generate_zshrc,
    "vimrc": generate_vimrc,
}

__all__ = ["GENERATORS", "generate_vimrc", "generate_zshrc"]
