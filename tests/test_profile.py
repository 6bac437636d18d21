"""Managed block in the PowerShell profile."""

from winstrap.lib.profile import BEGIN_MARKER, END_MARKER, configure_profile, render_block, upsert_block


def test_render_block_sorts_aliases_and_keeps_lines():
    block = render_block({"ll": "Get-ChildItem", "g": "git"}, ["Invoke-Expression (&starship init powershell)"])

    lines = block.splitlines()
    assert lines[0] == BEGIN_MARKER
    assert lines[-1] == END_MARKER
    assert lines.index("Set-Alias -Name g -Value git") < lines.index("Set-Alias -Name ll -Value Get-ChildItem")
    assert "Invoke-Expression (&starship init powershell)" in lines


def test_upsert_appends_then_replaces_keeping_user_text():
    user = "# my stuff\n$env:EDITOR = 'nvim'"
    first = upsert_block(user, render_block({"g": "git"}, []))
    second = upsert_block(first + "# after\n", render_block({"k": "kubectl"}, []))

    assert first.startswith("# my stuff\n$env:EDITOR = 'nvim'\n\n" + BEGIN_MARKER)
    assert "Set-Alias -Name g -Value git" not in second
    assert "Set-Alias -Name k -Value kubectl" in second
    assert second.count(BEGIN_MARKER) == 1
    assert second.endswith("# after\n")


def test_configure_profile_is_idempotent(tmp_path):
    profile = tmp_path / "Documents" / "PowerShell" / "Microsoft.PowerShell_profile.ps1"

    assert configure_profile(profile, aliases={"g": "git"}, lines=[]) is True
    content = profile.read_text(encoding="utf-8")
    assert configure_profile(profile, aliases={"g": "git"}, lines=[]) is False
    assert profile.read_text(encoding="utf-8") == content


def test_configure_profile_dry_run_writes_nothing(tmp_path):
    profile = tmp_path / "profile.ps1"

    assert configure_profile(profile, aliases={"g": "git"}, lines=[], dry_run=True) is True
    assert not profile.exists()
