"""YAML bootstrap config loading."""

import pytest

from winstrap.config import BootstrapConfig, load_bootstrap_config
from winstrap.errors import ConfigError


def test_no_config_uses_defaults():
    cfg = load_bootstrap_config(None)

    assert cfg.winget_packages == []
    assert cfg.fonts_dir == "{dotfiles}/fonts"
    assert cfg.profile_path.endswith("Microsoft.PowerShell_profile.ps1")


def test_full_config(tmp_path):
    path = tmp_path / "bootstrap.yaml"
    path.write_text(
        """
dotfiles_root: ~/src/dotfiles
packages:
  winget: [Git.Git, Neovim.Neovim]
  scoop: [fzf]
  scoop_buckets: [extras]
profile:
  aliases:
    g: git
  lines:
    - Invoke-Expression (&starship init powershell)
extra_links:
  "{home}/.bashrc": "{dotfiles}/bash/.bashrc"
""",
        encoding="utf-8",
    )

    cfg = load_bootstrap_config(str(path))
    state_cfg = cfg.to_state_config()

    assert cfg.dotfiles_root == "~/src/dotfiles"
    assert state_cfg["packages"] == {"winget": ["Git.Git", "Neovim.Neovim"], "scoop": ["fzf"], "scoop_buckets": ["extras"]}
    assert state_cfg["profile"]["aliases"] == {"g": "git"}
    assert state_cfg["extra_links"] == {"{home}/.bashrc": "{dotfiles}/bash/.bashrc"}


def test_missing_file_is_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_bootstrap_config(str(tmp_path / "nope.yaml"))


def test_non_yaml_suffix_is_config_error(tmp_path):
    path = tmp_path / "bootstrap.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_bootstrap_config(str(path))


@pytest.mark.parametrize(
    "body",
    [
        "- just\n- a list\n",
        "packages: [Git.Git]\n",
        "packages:\n  winget: Git.Git\n",
        "profile:\n  aliases: [g]\n",
        "key: [unclosed\n",
    ],
)
def test_invalid_config_is_config_error(tmp_path, body):
    path = tmp_path / "bootstrap.yml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_bootstrap_config(str(path))


def test_empty_paths_are_ignored():
    assert BootstrapConfig(raw={"paths": {"home": "", "appdata": "C:/x"}}).paths == {"appdata": "C:/x"}
