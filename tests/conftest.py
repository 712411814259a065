"""
Shared test fixtures and configuration.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from devstrap.adapters.mock import MockAdapter
from devstrap.adapters.registry import AdapterRegistry
from devstrap.core.engine.executor import Runner
from devstrap.core.models.profile import BootstrapConfig, HostEnvironment, OSProfile, OSTag


def make_which(*present: str) -> Callable[[str], str | None]:
    """A ``shutil.which`` stand-in that only knows the given commands."""
    found = {name: f"/usr/bin/{name}" for name in present}
    return found.get


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """An empty home directory."""
    path = tmp_path / "home" / "dev"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def host(home: Path) -> HostEnvironment:
    """A regular (non-root) user whose login shell is bash."""
    return HostEnvironment(
        home=home,
        user="dev",
        euid=1000,
        login_shell="/bin/bash",
        zsh_custom=home / ".oh-my-zsh" / "custom",
    )


@pytest.fixture
def make_config(host: HostEnvironment) -> Callable[..., BootstrapConfig]:
    """Build a BootstrapConfig for a given OS tag."""

    def _make(tag: OSTag = OSTag.UBUNTU, **kwargs) -> BootstrapConfig:
        profile_kwargs = {k: kwargs.pop(k) for k in ("curl_minimal",) if k in kwargs}
        profile = OSProfile(tag=tag, platform="linux", **profile_kwargs)
        return BootstrapConfig(profile=profile, host=kwargs.pop("host", host), **kwargs)

    return _make


@pytest.fixture
def mock_adapter() -> MockAdapter:
    return MockAdapter()


@pytest.fixture
def registry(mock_adapter: MockAdapter) -> AdapterRegistry:
    """Registry that routes every action to ``mock_adapter``."""
    reg = AdapterRegistry()
    reg.set_mock_mode(True, mock_adapter=mock_adapter)
    return reg


@pytest.fixture
def messages() -> list[tuple[str, str]]:
    """Collects (level, message) pairs from a reporter."""
    return []


@pytest.fixture
def runner(registry: AdapterRegistry, home: Path, messages: list) -> Runner:
    return Runner(
        registry,
        home=str(home),
        reporter=lambda level, msg: messages.append((level, msg)),
    )


@pytest.fixture(name="make_which")
def make_which_fixture() -> Callable[..., Callable[[str], str | None]]:
    return make_which
