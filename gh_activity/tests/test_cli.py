"""
gh_activity/tests/test_cli.py — Tests for the gh-activity command line.

Each call passes --env-file pointing at a missing file so a developer's own
.env never leaks into the run.
"""

import os

import pytest

from gh_activity.cli import _load_dotenv, build_parser, main


@pytest.fixture
def no_env(tmp_path, monkeypatch):
    monkeypatch.delenv("GH_ACTIVITY_DATA_PATH", raising=False)
    return ["--env-file", str(tmp_path / "missing.env")]


# ── run ───────────────────────────────────────────────────────────────────────

class TestRun:

    def test_prints_rankings(self, dataset_dir, no_env, capsys):
        assert main(no_env + ["run", "--data-path", dataset_dir, "--top", "2"]) == 0
        out = capsys.readouterr().out
        assert "ACTIVITY ANALYSIS COMPLETE" in out
        assert "Top 2 active non-bot users with most PRs and commits:" in out
        assert "    alice: 2 PRs, 4 commits" in out
        assert "    bob: 2 PRs, 1 commits" in out
        assert "ci[bot]" not in out
        assert "    octo/beta: 5 watch events" in out
        assert "    octo/alpha: 4 commits" in out

    def test_lists_are_in_ranking_order(self, dataset_dir, no_env, capsys):
        main(no_env + ["run", "--data-path", dataset_dir, "--top", "3"])
        out = capsys.readouterr().out
        assert out.index("octo/beta: 5 watch events") < out.index("octo/alpha: 3 watch events")
        assert out.index("alice: 2 PRs") < out.index("bob: 2 PRs") < out.index("carol: 0 PRs")

    def test_top_zero_prints_headers_only(self, dataset_dir, no_env, capsys):
        assert main(no_env + ["run", "--data-path", dataset_dir, "--top", "0"]) == 0
        out = capsys.readouterr().out
        assert "Top 0 repositories with most watch events:" in out
        assert "watch events\n" not in out.split("Top 0 repositories with most watch events:")[1]

    def test_default_width_is_ten(self, dataset_dir, no_env, capsys):
        main(no_env + ["run", "--data-path", dataset_dir])
        assert "Top 10 repositories with most commits:" in capsys.readouterr().out

    def test_writes_report_and_csvs(self, dataset_dir, no_env, tmp_path, capsys):
        report = tmp_path / "out" / "report.md"
        csv_dir = tmp_path / "out" / "csv"
        rc = main(no_env + [
            "run", "--data-path", dataset_dir,
            "--report-path", str(report), "--csv-dir", str(csv_dir),
        ])
        assert rc == 0
        assert report.is_file()
        assert (csv_dir / "top_watched_repos.csv").is_file()
        assert "Report saved to" in capsys.readouterr().out

    def test_data_path_from_environment(self, dataset_dir, no_env, monkeypatch, capsys):
        monkeypatch.setenv("GH_ACTIVITY_DATA_PATH", dataset_dir)
        assert main(no_env + ["run", "--top", "1"]) == 0
        assert "octo/beta: 5 watch events" in capsys.readouterr().out

    def test_missing_data_path_exits_1_without_report(self, tmp_path, no_env, capsys):
        rc = main(no_env + ["run", "--data-path", str(tmp_path / "nowhere")])
        assert rc == 1
        assert "ACTIVITY ANALYSIS COMPLETE" not in capsys.readouterr().out

    def test_malformed_data_exits_1(self, make_dataset, no_env, capsys):
        path = make_dataset(actors=[["one", "alice"]])
        assert main(no_env + ["run", "--data-path", path]) == 1
        assert "ACTIVITY ANALYSIS COMPLETE" not in capsys.readouterr().out

    def test_negative_top_is_rejected_by_parser(self, no_env):
        with pytest.raises(SystemExit):
            main(no_env + ["run", "--top", "-1"])


# ── check / export-graph ──────────────────────────────────────────────────────

def test_check_ok(dataset_dir, no_env, capsys):
    assert main(no_env + ["check", "--data-path", dataset_dir]) == 0
    out = capsys.readouterr().out
    assert f"Data path OK: {dataset_dir}" in out
    assert "events.csv" in out


def test_check_missing_file(dataset_dir, no_env):
    os.remove(os.path.join(dataset_dir, "repos.csv"))
    assert main(no_env + ["check", "--data-path", dataset_dir]) == 1


def test_export_graph(dataset_dir, no_env, tmp_path, capsys):
    output = tmp_path / "graph" / "activity.graphml"
    assert main(no_env + ["export-graph", "--data-path", dataset_dir, "--output", str(output)]) == 0
    assert output.is_file()
    assert "37 nodes, 55 edges" in capsys.readouterr().out


def test_subcommand_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


# ── .env loading ──────────────────────────────────────────────────────────────

class TestLoadDotenv:

    @pytest.fixture
    def env_file(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text(
            "# comment\n"
            "OTHER_SETTING=ignored\n"
            "not a pair\n"
            "GH_ACTIVITY_DATA_PATH='/from/dotenv'\n",
            encoding="utf-8",
        )
        return path

    @pytest.fixture(autouse=True)
    def restore_env(self, monkeypatch):
        # Registered with monkeypatch so values loaded by a test are undone.
        monkeypatch.setenv("GH_ACTIVITY_DATA_PATH", "")
        monkeypatch.delenv("GH_ACTIVITY_DATA_PATH")
        monkeypatch.delenv("OTHER_SETTING", raising=False)

    def test_sets_data_path_only(self, env_file):
        assert _load_dotenv(str(env_file)) == "/from/dotenv"
        assert os.environ["GH_ACTIVITY_DATA_PATH"] == "/from/dotenv"
        assert "OTHER_SETTING" not in os.environ

    def test_environment_wins(self, env_file, monkeypatch):
        monkeypatch.setenv("GH_ACTIVITY_DATA_PATH", "/from/env")
        assert _load_dotenv(str(env_file)) is None
        assert os.environ["GH_ACTIVITY_DATA_PATH"] == "/from/env"

    def test_missing_file_is_ignored(self, tmp_path):
        assert _load_dotenv(str(tmp_path / "absent.env")) is None
        assert "GH_ACTIVITY_DATA_PATH" not in os.environ

    def test_found_from_working_directory(self, env_file, tmp_path, monkeypatch):
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert _load_dotenv(None) == "/from/dotenv"

    def test_run_uses_dotenv_data_path(self, dataset_dir, tmp_path, capsys):
        env_file = tmp_path / "data.env"
        env_file.write_text(f"GH_ACTIVITY_DATA_PATH={dataset_dir}\n", encoding="utf-8")
        assert main(["--env-file", str(env_file), "run", "--top", "1"]) == 0
        assert "octo/beta: 5 watch events" in capsys.readouterr().out
