import json
from unittest.mock import patch

from click.testing import CliRunner

from status_dashboard.cli import cli


def _env(tmp_path):
    return {"CLAWD_DIR": str(tmp_path), "DASHBOARD_SECRET": "pw"}


class TestCheck:
    def test_missing_file(self, tmp_path):
        result = CliRunner().invoke(cli, ["check"], env=_env(tmp_path))
        assert result.exit_code == 1
        assert "missing" in result.output

    def test_valid_file(self, tmp_path, custom_snapshot):
        (tmp_path / "status.json").write_text(json.dumps(custom_snapshot))
        result = CliRunner().invoke(cli, ["check"], env=_env(tmp_path))
        assert result.exit_code == 0
        assert "ok (1 PRs, 1 tasks)" in result.output

    def test_reports_problems(self, tmp_path, custom_snapshot):
        custom_snapshot["tasks"][0]["status"] = "blocked"
        path = tmp_path / "other.json"
        path.write_text(json.dumps(custom_snapshot))
        result = CliRunner().invoke(cli, ["check", str(path)], env=_env(tmp_path))
        assert result.exit_code == 1
        assert "tasks[0].status" in result.output


class TestPublishDefault:
    def test_writes_status_file(self, tmp_path):
        result = CliRunner().invoke(cli, ["publish-default"], env=_env(tmp_path))
        assert result.exit_code == 0
        data = json.loads((tmp_path / "status.json").read_text())
        assert len(data["prs"]) == 9

    def test_print_only(self, tmp_path):
        result = CliRunner().invoke(cli, ["publish-default", "--print"], env=_env(tmp_path))
        assert result.exit_code == 0
        assert json.loads(result.output)["stats"]["issuesFound"] == 21
        assert not (tmp_path / "status.json").exists()


class TestPoll:
    def test_once_prints_summary(self, tmp_path):
        snapshot = {"lastUpdated": "2026-01-01T00:00:00Z", "prs": [{"status": "open"}], "tasks": []}
        with patch("status_dashboard.cli.poll_once") as poll_once:
            poll_once.side_effect = lambda url, verify, buffer: buffer.append("✅ summary") or snapshot
            result = CliRunner().invoke(cli, ["poll", "--once", "--url", "http://x/api/status"], env=_env(tmp_path))
        assert result.exit_code == 0
        assert "summary" in result.output
        poll_once.assert_called_once()

    def test_once_failure_exits_nonzero(self, tmp_path):
        with patch("status_dashboard.cli.poll_once", return_value=None):
            result = CliRunner().invoke(cli, ["poll", "--once"], env=_env(tmp_path))
        assert result.exit_code == 1


def test_serve_uses_config(tmp_path):
    with patch("status_dashboard.cli.create_app") as create_app:
        result = CliRunner().invoke(cli, ["serve", "--port", "6000"], env=_env(tmp_path))
    assert result.exit_code == 0
    config = create_app.call_args[0][0]
    assert config.secret == "pw"
    create_app.return_value.run.assert_called_once_with(host="127.0.0.1", port=6000, debug=False)


def test_bad_port_is_a_usage_error(tmp_path):
    env = dict(_env(tmp_path), DASHBOARD_PORT="not-a-port")
    result = CliRunner().invoke(cli, ["check"], env=env)
    assert result.exit_code == 2
    assert "DASHBOARD_PORT must be a port number" in result.output
    assert not isinstance(result.exception, ValueError)
