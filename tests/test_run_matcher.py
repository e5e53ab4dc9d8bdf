import io
import json

import pytest

import run_matcher


@pytest.fixture
def input_file(tmp_path):
    file_path = tmp_path / "input.txt"
    file_path.write_text("I live in the Bronx", encoding="utf-8")
    return file_path


def test_read_tokens_without_labels():
    tokens, pairs = run_matcher.read_tokens("the\nBronx\n")
    assert tokens == ["the", "Bronx"]
    assert pairs is None


def test_read_tokens_with_labels():
    tokens, pairs = run_matcher.read_tokens("the\tB-LOC\nBronx\tI-LOC\n,\n")
    assert tokens == ["the", "Bronx", ","]
    assert pairs == [("the", "B-LOC"), ("Bronx", "I-LOC"), (",", "")]


def test_read_tokens_with_windows_line_endings():
    tokens, pairs = run_matcher.read_tokens("the\r\nBronx\r\n")
    assert tokens == ["the", "Bronx"]
    assert pairs is None

    tokens, pairs = run_matcher.read_tokens("the\tB\r\nBronx\tI\r\n")
    assert tokens == ["the", "Bronx"]
    assert pairs == [("the", "B"), ("Bronx", "I")]


def test_tokens_mode_with_windows_line_endings(terms_file, tmp_path, capsys):
    tokens = tmp_path / "tokens.txt"
    tokens.write_bytes(b"in\r\nthe\r\nBronx\r\n")

    exit_code = run_matcher.main(
        ["--terms", str(terms_file), "--mode", "tokens", str(tokens)],
    )

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == [
        {"start": 1, "end": 2},
        {"start": 2, "end": 2},
    ]


def test_text_mode_prints_spans_and_text(terms_file, input_file, capsys):
    exit_code = run_matcher.main(["--terms", str(terms_file), str(input_file)])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == [
        {"start": 10, "end": 19, "text": "the Bronx"},
        {"start": 14, "end": 19, "text": "Bronx"},
    ]


def test_words_mode_prints_word_positions(terms_file, input_file, capsys):
    exit_code = run_matcher.main(
        ["--terms", str(terms_file), "--mode", "words", str(input_file)],
    )

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == [
        {"start": 3, "end": 4},
        {"start": 4, "end": 4},
    ]


def test_tokens_mode_reads_stdin(terms_file, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("in\tO\nthe\tB\nBronx\tI\n"))

    exit_code = run_matcher.main(["--terms", str(terms_file), "--mode", "tokens"])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == [
        {"start": 1, "end": 2},
        {"start": 2, "end": 2},
    ]


def test_reconstructed_mode(terms_file, tmp_path, capsys):
    tokens = tmp_path / "tokens.txt"
    tokens.write_text("the\n@newline\nBronx\n", encoding="utf-8")

    exit_code = run_matcher.main(
        ["--terms", str(terms_file), "--mode", "reconstructed", str(tokens)],
    )

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == [
        {"start": 1, "end": 10},
        {"start": 5, "end": 10},
    ]


def test_config_with_query_logging(terms_file, input_file, tmp_path, capsys):
    log_file = tmp_path / "logs" / "matcher.log"
    config_path = tmp_path / "config.txt"
    config_path.write_text(
        f"terms_path = {terms_file}\nlog_queries = yes\nlog_file = {log_file}\n",
        encoding="utf-8",
    )

    exit_code = run_matcher.main(
        ["--config_path", str(config_path), str(input_file)],
    )

    assert exit_code == 0
    assert len(json.loads(capsys.readouterr().out)) == 2
    assert "Mode: text, Input size: 19, Matches: 2" in log_file.read_text(
        encoding="utf-8",
    )


def test_missing_terms_file_reports_error(tmp_path, input_file, capsys):
    exit_code = run_matcher.main(
        ["--terms", str(tmp_path / "missing.txt"), str(input_file)],
    )

    assert exit_code == 1
    assert "[MATCHER ERROR]" in capsys.readouterr().err


def test_terms_or_config_is_required(capsys):
    with pytest.raises(SystemExit):
        run_matcher.main(["input.txt"])
