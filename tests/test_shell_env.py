"""
Tests for oh-my-zsh and plugin installation.
"""

from devstrap.core.services.shell_env import (
    ADDONS,
    install_oh_my_zsh,
    install_zsh_plugins,
    plan_addons,
    plan_oh_my_zsh,
)


class TestOhMyZsh:
    def test_installs_when_missing(self, make_config):
        actions = plan_oh_my_zsh(make_config())
        assert [a.id for a in actions] == ["shell:oh-my-zsh"]
        assert "--unattended" in actions[0].params["command"]

    def test_skips_when_present(self, make_config, home, runner, mock_adapter, messages):
        (home / ".oh-my-zsh").mkdir()
        install_oh_my_zsh(make_config(), runner)
        assert mock_adapter.call_count == 0
        assert ("info", "Oh My Zsh already installed") in messages


class TestAddons:
    def test_all_missing(self, make_config):
        actions = plan_addons(make_config())
        assert [a.id for a in actions] == [f"shell:clone:{a.name}" for a in ADDONS]
        assert all(a.adapter == "git" and a.params["operation"] == "clone" for a in actions)

    def test_theme_goes_to_themes(self, make_config, host):
        actions = {a.id: a for a in plan_addons(make_config())}
        p10k = actions["shell:clone:powerlevel10k"]
        assert p10k.params["dest"] == str(host.zsh_custom / "themes" / "powerlevel10k")

    def test_shallow_clones(self, make_config):
        actions = {a.id: a for a in plan_addons(make_config())}
        assert actions["shell:clone:powerlevel10k"].params["depth"] == 1
        assert actions["shell:clone:fast-syntax-highlighting"].params["depth"] == 1
        assert "depth" not in actions["shell:clone:zsh-autosuggestions"].params

    def test_existing_directories_are_skipped(self, make_config, host):
        (host.zsh_custom / "plugins" / "zsh-autosuggestions").mkdir(parents=True)
        ids = [a.id for a in plan_addons(make_config())]
        assert "shell:clone:zsh-autosuggestions" not in ids
        assert len(ids) == len(ADDONS) - 1

    def test_second_run_clones_nothing(self, make_config, host, runner, mock_adapter):
        for addon in ADDONS:
            addon.destination(host.zsh_custom).mkdir(parents=True)
        install_zsh_plugins(make_config(), runner)
        assert mock_adapter.call_count == 0

    def test_custom_zsh_custom(self, make_config, host, tmp_path):
        custom = tmp_path / "custom"
        config = make_config(host=host.model_copy(update={"zsh_custom": custom}))
        dests = {a.params["dest"] for a in plan_addons(config)}
        assert str(custom / "plugins" / "zsh-autosuggestions") in dests
