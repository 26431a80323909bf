"""Tests for the pre-flight aggregator."""

from devenv.config import ConfigLoader, ToolRequirement
from devenv.preflight import checker as checker_module
from devenv.preflight import (
    CheckResult,
    CheckStatus,
    PreflightChecker,
    run_checks,
    summarize,
)
from devenv.preflight.checks.display import DisplayAccess, GrantOutcome


class RecordingDisplayAccess(DisplayAccess):
    """Grants or refuses access and remembers what was requested."""

    def __init__(self, granted: bool = True):
        self.granted = granted
        self.requests = []

    def grant(self, display):
        self.requests.append(display)
        return GrantOutcome(granted=self.granted, message="granted" if self.granted else "refused")


def make_checker(config, fake_bin, ssh_dir, environ=None, access=None):
    return PreflightChecker(
        config,
        search_path=fake_bin.path,
        environ=environ if environ is not None else {},
        display_access=access or RecordingDisplayAccess(),
        ssh_dir=ssh_dir,
    )


def test_all_mandatory_tools_present(config, fake_bin, ssh_dir):
    fake_bin.add_all()

    result = make_checker(config, fake_bin, ssh_dir).run_all()

    assert result.fatal_count == 0
    assert result.passed
    assert result.exit_code == 0


def test_one_mandatory_tool_absent(config, fake_bin, ssh_dir):
    fake_bin.add_docker()

    result = make_checker(config, fake_bin, ssh_dir).run_all()

    assert result.fatal_count == 1
    assert not result.passed
    assert result.exit_code != 0
    assert [c.tool for c in result.errors] == ["Make"]


def test_missing_key_pair_never_changes_exit_status(config, fake_bin, ssh_dir):
    fake_bin.add_all()
    without_keys = make_checker(config, fake_bin, ssh_dir).run_all()

    (ssh_dir / "id_ed25519").write_text("key")
    with_keys = make_checker(config, fake_bin, ssh_dir).run_all()

    assert without_keys.exit_code == with_keys.exit_code == 0
    assert "SSH Keys" in [c.tool for c in without_keys.warnings]
    assert "SSH Keys" not in [c.tool for c in with_keys.warnings]


def test_display_unavailable_is_advisory(config, fake_bin, ssh_dir):
    fake_bin.add_all()
    access = RecordingDisplayAccess(granted=False)

    result = make_checker(config, fake_bin, ssh_dir, environ={"DISPLAY": ":0"}, access=access).run_all()

    assert result.passed
    assert access.requests == [":0"]
    assert "Display Server" in [c.tool for c in result.warnings]


def test_below_minimum_counts_as_fatal(config, fake_bin, ssh_dir):
    fake_bin.add_docker(version="19.3.0")
    fake_bin.add_make()

    result = make_checker(config, fake_bin, ssh_dir).run_all()

    assert result.fatal_count == 1
    assert result.errors[0].status == CheckStatus.BELOW_MINIMUM


def test_summary_text(config, fake_bin, ssh_dir):
    result = make_checker(config, fake_bin, ssh_dir).run_all()

    # docker, compose and make missing; display and keys advisory
    assert result.summary() == "FAILED: 0/5 checks passed (3 errors, 2 warnings)"


def test_summary_with_warnings_only(config, fake_bin, ssh_dir):
    fake_bin.add_all()

    result = make_checker(config, fake_bin, ssh_dir).run_all()

    assert result.summary().startswith("PASSED with warnings")


def test_run_checks_maps_requirements_in_order(fake_bin):
    fake_bin.add("git", 'echo "git version 2.40.0"\n')
    requirements = [
        ToolRequirement(name="Git", executable="git", minimum_version="2.30"),
        ToolRequirement(name="Curl", executable="curl"),
    ]

    results = run_checks(requirements, search_path=fake_bin.path)

    assert [r.tool for r in results] == ["Git", "Curl"]
    assert [r.status for r in results] == [CheckStatus.OK, CheckStatus.MISSING]


def test_summarize_folds_fatal_results():
    results = [
        CheckResult(tool="a", status=CheckStatus.OK, message=""),
        CheckResult(tool="b", status=CheckStatus.MISSING, message=""),
        CheckResult(tool="c", status=CheckStatus.BELOW_MINIMUM, message=""),
        CheckResult(tool="d", status=CheckStatus.WARNING, message=""),
    ]

    summary = summarize(results)

    assert summary.fatal_count == 2
    assert [c.tool for c in summary.warnings] == ["d"]


def test_summarize_empty_passes():
    assert summarize([]).passed


def test_run_check_by_name(config, fake_bin, ssh_dir):
    fake_bin.add_make()
    checker = make_checker(config, fake_bin, ssh_dir)

    assert checker.run_check("make").status == CheckStatus.OK
    assert checker.run_check("Docker").status == CheckStatus.MISSING
    assert checker.run_check("keys").status == CheckStatus.WARNING
    assert checker.run_check("nonexistent") is None


def test_docker_group_check_included_when_configured(config, fake_bin, ssh_dir):
    cfg = config.model_copy(update={"docker_group": "docker"})

    result = make_checker(cfg, fake_bin, ssh_dir).run_all()

    assert "Docker Group" in [c.tool for c in result.checks]
    assert all(not c.fatal for c in result.checks if c.tool == "Docker Group")


def test_run_all_routes_known_tools_through_dedicated_checks(config, fake_bin, ssh_dir, monkeypatch):
    seen = []

    def fake_build_tool_check(requirement, **kwargs):
        seen.append(requirement.name)
        return CheckResult(tool=requirement.name, status=CheckStatus.OK, message="stubbed")

    monkeypatch.setitem(checker_module.TOOL_CHECKS, "make", fake_build_tool_check)
    fake_bin.add_docker()

    result = make_checker(config, fake_bin, ssh_dir).run_all()

    assert seen == ["Make"]
    assert result.passed


def test_run_all_honors_configured_minimum(fake_bin, ssh_dir):
    fake_bin.add_all()
    strict = ConfigLoader.from_dict({
        "docker_group": None,
        "tools": [{"name": "Docker", "minimum_version": "30.0"}],
    }).config

    result = make_checker(strict, fake_bin, ssh_dir).run_all()

    assert [c.tool for c in result.errors] == ["Docker"]
    assert "30.0" in result.errors[0].message
