"""CLI exit codes and output."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from daily_digest.cli.digest import cli


EMPTY_SOURCES = "lookback_days: 3\nboost_keywords: [LLM, agent]\nsources: []\n"


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated working directory without digest environment variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "ZHIPU_API_KEY",
        "DIGEST_DATE",
        "DIGEST_DRY_RUN",
        "DIGEST_DRY_RUN_LLM",
        "DIGEST_SKIP_LLM",
        "DIGEST_FORCE_LLM",
    ):
        monkeypatch.delenv(name, raising=False)
    (tmp_path / "sources.yml").write_text(EMPTY_SOURCES, encoding="utf-8")
    return tmp_path


class TestRunCommand:
    """Tests for `daily-digest run`."""

    def test_malformed_date_exits_1(self, workspace: Path) -> None:
        """A bad date override is fatal."""
        result = CliRunner().invoke(
            cli, ["run", "--date", "2025/01/15", "--skip-llm", "--no-json-logs"]
        )

        assert result.exit_code == 1
        assert not (workspace / "source").exists()

    def test_missing_config_exits_1(self, workspace: Path) -> None:
        """A missing sources file is fatal."""
        result = CliRunner().invoke(
            cli, ["run", "--config", "missing.yml", "--skip-llm", "--no-json-logs"]
        )

        assert result.exit_code == 1
        assert not (workspace / "source").exists()

    def test_missing_api_key_exits_1(self, workspace: Path) -> None:
        """A run that may call the model needs a key."""
        result = CliRunner().invoke(cli, ["run", "--no-json-logs"])

        assert result.exit_code == 1
        assert not (workspace / "source").exists()

    def test_skip_llm_writes_document(self, workspace: Path) -> None:
        """Without sources the run still writes an empty post."""
        result = CliRunner().invoke(
            cli,
            ["run", "--date", "2025-01-15", "--skip-llm", "--no-json-logs"],
        )

        assert result.exit_code == 0, result.output
        post = workspace / "source" / "_posts" / "digest-2025-01-15.md"
        assert post.exists()
        assert "AI日报 · 2025-01-15" in post.read_text(encoding="utf-8")
        assert (workspace / "data" / "digest-cache.json").exists()

    def test_env_flags_combine(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Environment flags apply without CLI flags."""
        monkeypatch.setenv("DIGEST_DRY_RUN", "true")
        monkeypatch.setenv("DIGEST_DATE", "2025-01-15")

        result = CliRunner().invoke(cli, ["run", "--no-json-logs"])

        assert result.exit_code == 0, result.output
        assert "Dry run" in result.output
        assert not (workspace / "source").exists()


class TestValidateCommand:
    """Tests for `daily-digest validate`."""

    def test_reports_summary(self, workspace: Path) -> None:
        """A valid file reports counts and keywords."""
        result = CliRunner().invoke(cli, ["validate"])

        assert result.exit_code == 0
        assert "Sources: 0" in result.output
        assert "Lookback days: 3" in result.output
        assert "LLM, agent" in result.output

    def test_broken_file_exits_1(self, workspace: Path) -> None:
        """Broken YAML fails validation."""
        (workspace / "bad.yml").write_text("sources: [oops\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["validate", "--config", "bad.yml"])

        assert result.exit_code == 1
