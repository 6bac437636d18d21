"""winget/scoop installers over a faked command runner."""

import pytest

from winstrap.lib import packages
from winstrap.lib.command import CmdResult
from winstrap.lib.packages import ScoopInstaller, WingetInstaller


@pytest.fixture
def commands(monkeypatch):
    calls = []
    failing = set()

    def fake_run_cmd(argv, *, check=True, dry_run=False, **kwargs):
        calls.append(list(argv))
        rc = 1 if any(a in failing for a in argv) else 0
        return CmdResult(argv=list(argv), returncode=rc, stdout="", stderr="boom" if rc else "")

    monkeypatch.setattr(packages, "run_cmd", fake_run_cmd)
    fake_run_cmd.calls = calls
    fake_run_cmd.failing = failing
    return fake_run_cmd


def test_winget_installs_each_id_in_sorted_order(commands):
    result = WingetInstaller().install({"Git.Git", "Neovim.Neovim", "Microsoft.PowerShell"})

    assert [c[3] for c in commands.calls] == ["Git.Git", "Microsoft.PowerShell", "Neovim.Neovim"]
    assert commands.calls[0][:2] == ["winget", "install"]
    assert "--exact" in commands.calls[0]
    assert result.ok
    assert result.installed == ["Git.Git", "Microsoft.PowerShell", "Neovim.Neovim"]


def test_one_failure_does_not_stop_the_rest(commands):
    commands.failing.add("Broken.Package")

    result = WingetInstaller().install({"Broken.Package", "Git.Git"})

    assert result.installed == ["Git.Git"]
    assert result.failed == {"Broken.Package": "boom"}
    assert not result.ok


def test_scoop_adds_buckets_before_installing(commands):
    result = ScoopInstaller(buckets=["extras", "nerd-fonts"]).install({"fzf"})

    assert commands.calls == [
        ["scoop", "bucket", "add", "extras"],
        ["scoop", "bucket", "add", "nerd-fonts"],
        ["scoop", "install", "fzf"],
    ]
    assert result.to_dict() == {"installer": "scoop", "installed": ["fzf"], "failed": {}}


def test_scoop_with_nothing_to_install_adds_no_buckets(commands):
    ScoopInstaller(buckets=["extras"]).install(set())

    assert commands.calls == []
