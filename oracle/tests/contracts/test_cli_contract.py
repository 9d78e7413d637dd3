"""
Contract tests for the oracle command-line interface.

Commands run in-process through main(argv) against a temporary recency file.
"""

import json
import logging

import pytest

from oracle.app.cli import _parse_axes, _parse_token, build_parser, main

ORACLE_VARS = [
    "ORACLE_DECK_PATH",
    "ORACLE_RECENCY_PATH",
    "ORACLE_STORE_RETRY_MS",
    "ORACLE_COMMIT_SELECTIONS",
    "ORACLE_LOG_LEVEL",
    "ORACLE_LOG_FILE",
]


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    """Isolated environment plus root logger state restored after the test."""
    for var in ORACLE_VARS:
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.setenv("ORACLE_ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.setenv("ORACLE_RECENCY_PATH", str(tmp_path / "recency.json"))
    monkeypatch.setenv("ORACLE_STORE_RETRY_MS", "1")

    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield monkeypatch
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestArgumentParsing:

    def test_token_specs(self):
        assert _parse_token("practical:4").weight == 4.0
        assert _parse_token("bold").weight == 1.0
        assert _parse_token("ratio:high").name == "ratio:high"

    def test_negative_token_weight_rejected(self):
        with pytest.raises(ValueError):
            _parse_token("bold:-1")

    def test_axes_spec(self):
        axes = _parse_axes("8,7,3,5")
        assert (axes.action, axes.tempo, axes.strategy, axes.visibility) == (8.0, 7.0, 3.0, 5.0)

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestDrawHistoryClear:

    def test_draw_json_then_history_then_clear(self, cli_env, capsys):
        assert main(["draw", "--profile", "alice", "--day", "2025-06-15", "--json"]) == 0
        reading = json.loads(capsys.readouterr().out)

        assert reading["profile"] == "alice"
        assert reading["day"] == "2025-06-15"
        assert reading["card"]
        assert sum(reading["vibe"].values()) == 21

        assert main(["history", "--profile", "alice", "--day", "2025-06-16"]) == 0
        history = capsys.readouterr().out
        assert "2025-06-15" in history
        assert reading["card"] in history
        assert "1d ago" in history

        assert main(["clear", "--profile", "alice"]) == 0
        assert "Cleared 1 entries for alice" in capsys.readouterr().out

        main(["history", "--profile", "alice", "--day", "2025-06-16"])
        assert "No selections" in capsys.readouterr().out

    def test_no_commit_preview(self, cli_env, capsys):
        assert main(["draw", "--profile", "alice", "--day", "2025-06-15", "--no-commit",
                     "--token", "practical:4", "--token", "bold"]) == 0
        out = capsys.readouterr().out
        assert "Card:" in out

        main(["history", "--profile", "alice", "--day", "2025-06-15"])
        assert "No selections" in capsys.readouterr().out

    def test_tokens_file(self, cli_env, tmp_path, capsys):
        tokens_file = tmp_path / "tokens.json"
        tokens_file.write_text(json.dumps([{"name": "practical", "weight": 4.0, "originType": "weather"}]),
                               encoding="utf-8")

        assert main(["draw", "--profile", "alice", "--day", "2025-06-15", "--json", "--no-commit",
                     "--tokens-file", str(tokens_file)]) == 0
        reading = json.loads(capsys.readouterr().out)
        assert reading["vibe"]["utility"] == 10

    def test_invalid_token_exits_with_usage_error(self, cli_env):
        assert main(["draw", "--profile", "alice", "--token", "bold:-1"]) == 2

    @pytest.mark.parametrize("records", [[{"weight": 2.0}], ["bold"], [{"name": "bold", "weight": "heavy"}]])
    def test_malformed_tokens_file_exits_with_usage_error(self, cli_env, tmp_path, records):
        tokens_file = tmp_path / "tokens.json"
        tokens_file.write_text(json.dumps(records), encoding="utf-8")

        assert main(["draw", "--profile", "alice", "--day", "2025-06-15", "--no-commit",
                     "--tokens-file", str(tokens_file)]) == 2

    def test_missing_deck_returns_failure(self, cli_env, tmp_path, capsys):
        cli_env.setenv("ORACLE_DECK_PATH", str(tmp_path / "absent.json"))
        assert main(["draw", "--profile", "alice", "--day", "2025-06-15"]) == 1
        assert "no_deck" in capsys.readouterr().out


class TestValidateDeck:

    def test_bundled_deck_is_clean(self, cli_env, capsys):
        assert main(["validate-deck"]) == 0
        out = capsys.readouterr().out
        assert "78 cards loaded" in out
        assert "OK" in out

    def test_problems_reported(self, cli_env, tmp_path, capsys):
        deck = tmp_path / "cards.json"
        deck.write_text(json.dumps([{"name": "The Fool", "arcana": "major", "number": 0}]), encoding="utf-8")

        assert main(["validate-deck", "--deck", str(deck)]) == 1
        assert "expected 22 major arcana, found 1" in capsys.readouterr().out

    def test_unreadable_deck(self, cli_env, tmp_path, capsys):
        assert main(["validate-deck", "--deck", str(tmp_path / "absent.json")]) == 1
        assert "Deck unavailable" in capsys.readouterr().out


class TestConfiguration:

    def test_invalid_config_exits_2(self, cli_env):
        cli_env.setenv("ORACLE_LOG_LEVEL", "LOUD")
        assert main(["validate-deck"]) == 2

    def test_log_file_written(self, cli_env, tmp_path, capsys):
        log_file = tmp_path / "logs" / "oracle.log"
        cli_env.setenv("ORACLE_LOG_FILE", str(log_file))

        main(["draw", "--profile", "alice", "--day", "2025-06-15", "--no-commit"])
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.exists()
        assert "[SELECT]" in log_file.read_text(encoding="utf-8")
