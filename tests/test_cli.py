"""Tests for the devenv command-line interface."""

import pytest
import yaml
from click.testing import CliRunner

from devenv.cli import cli


@pytest.fixture
def env(tmp_path, fake_bin):
    """Environment with a fabricated PATH, an empty HOME and no display."""
    home = tmp_path / "home"
    (home / ".ssh").mkdir(parents=True)
    config = tmp_path / "devenv-test.yaml"
    config.write_text("docker_group: null\n")
    return {
        "PATH": fake_bin.path,
        "HOME": str(home),
        "DISPLAY": None,
        "DEVENV_CONFIG": str(config),
    }


def invoke(args, env):
    return CliRunner().invoke(cli, args, env=env)


def test_check_passes_with_all_tools(fake_bin, env):
    fake_bin.add_all()

    result = invoke(["check"], env)

    assert result.exit_code == 0, result.output
    assert "PASSED with warnings" in result.output
    assert "Ready to build" in result.output


def test_check_fails_when_tool_missing(fake_bin, env):
    fake_bin.add_docker()

    result = invoke(["check"], env)

    assert result.exit_code == 1
    assert "FAILED" in result.output
    assert "1 errors" in result.output
    assert "Fatal checks failed: 1" in result.output


def test_check_shows_remediation_for_missing_tool(fake_bin, env):
    fake_bin.add_docker()

    result = invoke(["check"], env)

    assert "apk" in result.output
    assert "dnf" in result.output


def test_key_pair_does_not_change_exit_status(fake_bin, env, tmp_path):
    fake_bin.add_all()
    without_keys = invoke(["check"], env)

    (tmp_path / "home" / ".ssh" / "id_rsa").write_text("key")
    with_keys = invoke(["check"], env)

    assert without_keys.exit_code == with_keys.exit_code == 0


def test_check_with_explicit_config(fake_bin, env, tmp_path):
    fake_bin.add_all()
    strict = tmp_path / "strict.yaml"
    strict.write_text(yaml.dump({
        "docker_group": None,
        "tools": [{"name": "Docker", "minimum_version": "99.0"}],
    }))

    result = invoke(["check", "--config", str(strict)], env)

    assert result.exit_code == 1
    assert "99.0" in result.output


def test_check_reports_config_error(env, tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("tools: [unclosed\n")

    result = invoke(["check", "-c", str(bad)], env)

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_setup_halts_before_build_when_check_fails(fake_bin, env, tmp_path):
    fake_bin.add_docker()
    project = tmp_path / "project"
    project.mkdir()
    (project / "Makefile").write_text("")

    result = invoke(["setup", "-y", "-p", str(project)], env)

    assert result.exit_code == 1
    assert not (project / "backups").exists()


def test_setup_runs_make_targets(fake_bin, env, tmp_path):
    log = tmp_path / "make.log"
    fake_bin.add_docker()
    fake_bin.add("make", f'echo "$@" >> {log}\necho "GNU Make 4.4.1"\n')
    project = tmp_path / "project"
    project.mkdir()
    (project / "Makefile").write_text("")

    result = invoke(["setup", "--yes", "--project-dir", str(project)], env)

    assert result.exit_code == 0, result.output
    # the first call is the version probe during the check
    assert log.read_text().split("\n")[1:4] == ["build", "up", "clone-nvim"]
    assert (project / "backups").is_dir()


def test_setup_build_failure_exits_nonzero(fake_bin, env, tmp_path):
    fake_bin.add_docker()
    fake_bin.add("make", 'if [ "$1" = "build" ]; then exit 2; fi\necho "GNU Make 4.4.1"\n')
    project = tmp_path / "project"
    project.mkdir()
    (project / "Makefile").write_text("")

    result = invoke(["setup", "-y", "-p", str(project)], env)

    assert result.exit_code == 1
    assert "Setup failed" in result.output


def test_init_writes_defaults(env, tmp_path):
    output = tmp_path / "generated.yaml"

    result = invoke(["init", "-o", str(output)], env)

    assert result.exit_code == 0, result.output
    data = yaml.safe_load(output.read_text())
    assert [t["name"] for t in data["tools"]] == ["Docker", "Docker Compose", "Make"]


def test_init_refuses_overwrite_without_confirmation(env, tmp_path):
    output = tmp_path / "existing.yaml"
    output.write_text("keep: me\n")

    result = CliRunner().invoke(cli, ["init", "-o", str(output)], env=env, input="n\n")

    assert "Aborted" in result.output
    assert output.read_text() == "keep: me\n"


def test_show_config(env):
    result = invoke(["show-config"], env)

    assert result.exit_code == 0
    assert "Compose" in result.output
    assert "20.10" in result.output


def test_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "1.0.0" in result.output


def test_check_reports_undecodable_config(env, tmp_path):
    bad = tmp_path / "binary.yaml"
    bad.write_bytes(b"docker_group: \xff\xfe\n")

    result = invoke(["check", "-c", str(bad)], env)

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_bracketed_tool_output_is_shown_literally(fake_bin, env):
    fake_bin.add_all()
    fake_bin.add("xhost", 'echo "[/oops] refused" >&2\nexit 1\n')

    result = invoke(["check"], dict(env, DISPLAY=":0"))

    assert result.exit_code == 0, result.output
    assert "[/oops]" in result.output
