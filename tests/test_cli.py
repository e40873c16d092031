"""Tests for the gospelera command line."""

from click.testing import CliRunner

from gospelera.cli import main


def test_check_password():
    runner = CliRunner()
    ok = runner.invoke(main, ["check-password", "BlueSky!Prayer2026"])
    assert ok.exit_code == 0
    assert "meets the policy" in ok.output

    bad = runner.invoke(main, ["check-password", "Password1!"])
    assert bad.exit_code == 1


def test_commit_and_spam_check(tmp_path):
    runner = CliRunner()
    data_dir = str(tmp_path)

    result = runner.invoke(main, ["spam-check", "u1", "--data-dir", data_dir])
    assert result.exit_code == 0
    assert "allowed" in result.output

    for request_id in ("1", "2", "3"):
        assert runner.invoke(main, ["commit", "u1", request_id, "-d", data_dir]).exit_code == 0

    # Unknown profile: no new-account points, rapid-fire alone only warns
    warned = runner.invoke(main, ["commit", "u1", "4", "-d", data_dir])
    assert warned.exit_code == 0
    assert "Committed" in warned.output

    assert runner.invoke(main, ["confirm", "u1", "4", "-d", data_dir, "--note", "amen"]).exit_code == 0
    assert runner.invoke(main, ["confirm", "u1", "99", "-d", data_dir]).exit_code == 1


def test_spam_stats_empty(tmp_path):
    result = CliRunner().invoke(main, ["spam-stats", "--data-dir", str(tmp_path)])
    assert result.exit_code == 0
    assert "No suspicious users" in result.output


def test_policy_show(tmp_path):
    policy_file = tmp_path / "policy.yaml"
    policy_file.write_text("name: strict\nblock_score: 60\n")
    result = CliRunner().invoke(main, ["policy", "show", "--policy", str(policy_file)])
    assert result.exit_code == 0
    assert "strict" in result.output
    assert "rapid_fire.min_count" in result.output
