"""End-to-end CLI runs against a synthetic home directory."""

import json
import os

import pytest

from winstrap.lib.registry import MemoryRegistryAccessor
from winstrap.main import build_steps, main, run
from winstrap.steps import ConfigureProfileStep, InstallFontsStep, InstallPackagesStep, LinkDotfilesStep


@pytest.fixture
def config_file(tmp_path, ctx):
    path = tmp_path / "bootstrap.yaml"
    path.write_text(
        f"""
dotfiles_root: {json.dumps(str(ctx.dotfiles))}
paths:
  home: {json.dumps(str(ctx.home))}
  appdata: {json.dumps(str(ctx.appdata))}
  local_appdata: {json.dumps(str(ctx.local_appdata))}
  documents: {json.dumps(str(ctx.documents))}
profile:
  aliases:
    g: git
""",
        encoding="utf-8",
    )
    return path


def _argv(tmp_path, config_file, *extra):
    return [
        "--config",
        str(config_file),
        "--state",
        str(tmp_path / "state" / "state.json"),
        "--log",
        str(tmp_path / "logs" / "winstrap.log"),
        "--skip-packages",
        "--skip-fonts",
        *extra,
    ]


def test_full_run_links_dotfiles_and_writes_state(tmp_path, ctx, config_file):
    assert main(_argv(tmp_path, config_file)) == 0

    assert (ctx.home / ".gitconfig").read_text(encoding="utf-8") == "[user]\n\tname = Test\n"
    assert (ctx.local_appdata / "nvim" / "init.lua").exists()
    profile = ctx.documents / "PowerShell" / "Microsoft.PowerShell_profile.ps1"
    assert "Set-Alias -Name g -Value git" in profile.read_text(encoding="utf-8")

    state = json.loads((tmp_path / "state" / "state.json").read_text(encoding="utf-8"))
    links = state["execution"]["decisions"]["links"]
    assert links["summary"]["linked"] >= 3
    assert links["summary"]["failed"] == 0
    assert "20_link_dotfiles" in state["execution"]["completed_steps"]
    assert (tmp_path / "logs" / "winstrap.log").exists()


def test_rerun_reconciles_links_again(tmp_path, ctx, config_file):
    assert main(_argv(tmp_path, config_file)) == 0
    os.unlink(ctx.home / ".gitconfig")

    assert main(_argv(tmp_path, config_file)) == 0

    assert (ctx.home / ".gitconfig").exists()
    state = json.loads((tmp_path / "state" / "state.json").read_text(encoding="utf-8"))
    assert "20_link_dotfiles" in state["execution"]["summary"]["ran_steps"]
    assert "40_configure_profile" in state["execution"]["summary"]["skipped_steps"]


def test_dry_run_changes_nothing(tmp_path, ctx, config_file, tree_snapshot):
    before = tree_snapshot(ctx.home)

    assert main(_argv(tmp_path, config_file, "--dry-run")) == 0

    assert tree_snapshot(ctx.home) == before
    assert not (tmp_path / "state" / "state.json").exists()


def test_skip_links(tmp_path, ctx, config_file):
    assert main(_argv(tmp_path, config_file, "--skip-links")) == 0

    assert not (ctx.home / ".gitconfig").exists()


def test_dotfiles_flag_overrides_config(tmp_path, ctx, config_file):
    other = tmp_path / "other-dots"
    (other / "git").mkdir(parents=True)
    (other / "git" / ".gitconfig").write_text("[core]\n", encoding="utf-8")

    assert main(_argv(tmp_path, config_file, "--dotfiles", str(other))) == 0

    assert (ctx.home / ".gitconfig").read_text(encoding="utf-8") == "[core]\n"


def test_unreadable_config_exits_non_zero(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("- not\n- a mapping\n", encoding="utf-8")

    assert main(["--config", str(bad), "--state", str(tmp_path / "s.json"), "--log", str(tmp_path / "l.log")]) == 1

    state = json.loads((tmp_path / "s.json").read_text(encoding="utf-8"))
    assert state["execution"]["errors"]


def test_bad_link_template_exits_non_zero(tmp_path, ctx, config_file):
    with config_file.open("a", encoding="utf-8") as f:
        f.write('extra_links:\n  "{nowhere}/x": "{dotfiles}/x"\n')

    assert main(_argv(tmp_path, config_file)) == 1

    state = json.loads((tmp_path / "state" / "state.json").read_text(encoding="utf-8"))
    assert state["execution"]["errors"][-1]["step"] == "20_link_dotfiles"


def test_missing_sources_still_exit_zero(tmp_path, ctx, config_file):
    assert main(_argv(tmp_path, config_file)) == 0

    state = json.loads((tmp_path / "state" / "state.json").read_text(encoding="utf-8"))
    assert state["execution"]["decisions"]["links"]["summary"]["skipped"] > 0


def test_run_with_injected_steps(tmp_path, ctx, config_file):
    registry = MemoryRegistryAccessor()
    fonts = ctx.dotfiles / "fonts"
    fonts.mkdir()
    (fonts / "Hack.ttf").write_bytes(b"hack")

    state = run(
        config_path=str(config_file),
        state_path=str(tmp_path / "state.json"),
        log_path=str(tmp_path / "run.log"),
        overrides={"skip_packages": True},
        steps=[InstallFontsStep(registry=registry, validator=lambda p: True, notifier=lambda: None)],
    )

    assert state["execution"]["decisions"]["fonts"]["installed"] == ["Hack.ttf"]
    assert registry.values


def test_default_step_order():
    assert [type(s) for s in build_steps()] == [
        InstallPackagesStep,
        LinkDotfilesStep,
        InstallFontsStep,
        ConfigureProfileStep,
    ]
