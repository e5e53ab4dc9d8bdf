from pathlib import Path

import pytest

from src.matcher.config import (
    DEFAULT_LOG_FILE,
    ConfigBoolParsingError,
    ConfigNotFoundError,
    MatcherConfig,
    load_config_file,
    parse_bool,
)
from src.matcher.tokenizer import FULL_PUNCTUATIONS, NEWLINE_MARKER

# Test data for valid configurations
VALID_CONFIG = """
# Matcher configuration
terms_path = {terms_path}
punctuation = ,;-
newline_marker = <nl>
log_queries = yes
log_file = {log_file}
"""

MISSING_KEY_CONFIG = """
punctuation = ,;
log_queries = false
"""

INVALID_BOOL_CONFIG = """
terms_path = {terms_path}
log_queries = maybe
"""


@pytest.fixture
def terms_path(tmp_path):
    file_path = tmp_path / "terms.txt"
    file_path.write_text("the bronx\n", encoding="utf-8")
    return file_path


# Test parse_bool function
@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", True),
        ("True", True),
        ("TRUE", True),
        ("1", True),
        ("yes", True),
        ("false", False),
        ("False", False),
        ("FALSE", False),
        ("0", False),
        ("no", False),
    ],
)
def test_parse_bool_valid(value, expected):
    """Test valid boolean values."""
    assert parse_bool("test_key", value) == expected


@pytest.mark.parametrize("value", ["maybe", "2", "yess", "tru", "invalid"])
def test_parse_bool_invalid(value):
    """Test invalid boolean values."""
    with pytest.raises(ConfigBoolParsingError) as excinfo:
        parse_bool("test_key", value)
    assert "Invalid boolean value for key 'test_key'" in str(excinfo.value)


# Test MatcherConfig class
def test_matcher_config_defaults(terms_path):
    """Test MatcherConfig initialization with default settings."""
    config = MatcherConfig(terms_path)

    assert config.terms_path == terms_path
    assert config.punctuation == FULL_PUNCTUATIONS
    assert config.newline_marker == NEWLINE_MARKER
    assert config.log_queries is False
    assert config.log_file == DEFAULT_LOG_FILE


def test_matcher_config_repr(terms_path):
    """Test the string representation of MatcherConfig."""
    config = MatcherConfig(terms_path, log_queries=True)

    repr_str = repr(config)
    assert "Matcher configuration settings" in repr_str
    assert str(terms_path) in repr_str
    assert "Log queries: YES" in repr_str
    assert "Newline marker: @newline" in repr_str


# Test load_config_file function
def test_load_valid_config(tmp_path, terms_path):
    """Test loading a valid configuration file."""
    log_file = tmp_path / "logs" / "matcher.log"
    config_path = tmp_path / "config.txt"
    config_path.write_text(
        VALID_CONFIG.format(terms_path=terms_path, log_file=log_file),
    )

    config = load_config_file(config_path)

    assert config.terms_path == terms_path
    assert config.punctuation == ",;-"
    assert config.newline_marker == "<nl>"
    assert config.log_queries is True
    assert config.log_file == log_file


def test_load_config_missing_file():
    """Test loading a configuration from a non-existent file."""
    with pytest.raises(FileNotFoundError) as excinfo:
        load_config_file(Path("/non/existent/path"))
    assert "Missing required configuration file" in str(excinfo.value)


def test_load_config_missing_key(tmp_path):
    """Test configuration without the required terms path."""
    config_path = tmp_path / "config.txt"
    config_path.write_text(MISSING_KEY_CONFIG)

    with pytest.raises(ConfigNotFoundError) as excinfo:
        load_config_file(config_path)
    assert "Missing required configuration: 'terms_path'" in str(excinfo.value)


def test_load_config_invalid_bool(tmp_path, terms_path):
    """Test configuration with an invalid boolean value."""
    config_path = tmp_path / "config.txt"
    config_path.write_text(INVALID_BOOL_CONFIG.format(terms_path=terms_path))

    with pytest.raises(ConfigBoolParsingError) as excinfo:
        load_config_file(config_path)
    assert (
        "Invalid boolean value for key 'log_queries'" in str(excinfo.value)
    )


def test_load_config_comments_and_case_ignored(tmp_path, terms_path):
    """Test that comments are skipped and keys are case-insensitive."""
    config_content = f"""
    # This is a comment
    TERMS_PATH = {terms_path}
    # Another comment
    Log_Queries = 0
    """

    config_path = tmp_path / "config.txt"
    config_path.write_text(config_content)

    config = load_config_file(config_path)

    assert config.terms_path == terms_path
    assert config.log_queries is False
    assert config.punctuation == FULL_PUNCTUATIONS


def test_load_config_relative_terms_path(tmp_path, terms_path):
    """Test that a relative terms path is resolved next to the config."""
    config_path = tmp_path / "config.txt"
    config_path.write_text("terms_path = terms.txt\n")

    config = load_config_file(config_path)

    assert config.terms_path == terms_path


def test_load_config_missing_terms_file(tmp_path):
    """Test that FileNotFoundError is raised if the term file is missing."""
    non_existent = tmp_path / "non_existent.txt"
    config_path = tmp_path / "config.txt"
    config_path.write_text(f"terms_path = {non_existent}\n")

    with pytest.raises(FileNotFoundError) as excinfo:
        load_config_file(config_path)
    assert (
        f"The required file {non_existent} "
        "doesn't exist" in str(excinfo.value)
    )


def test_load_config_invalid_line_format(tmp_path, terms_path):
    """Test that malformed lines are ignored."""
    config_content = f"""
    terms_path = {terms_path}
    invalid_line_without_equals
    newline_marker = @nl
    """

    config_path = tmp_path / "config.txt"
    config_path.write_text(config_content)

    config = load_config_file(config_path)

    assert config.terms_path == terms_path
    assert config.newline_marker == "@nl"


def test_load_config_relative_log_file(tmp_path, terms_path):
    """Test that a relative log file is resolved next to the config."""
    config_path = tmp_path / "config.txt"
    config_path.write_text(
        "terms_path = terms.txt\nlog_file = logs/queries.log\n",
    )

    config = load_config_file(config_path)

    assert config.log_file == tmp_path / "logs" / "queries.log"


def test_load_config_default_log_file(tmp_path, terms_path):
    """Test that the default log file lives next to the config."""
    config_path = tmp_path / "config.txt"
    config_path.write_text(f"terms_path = {terms_path}\n")

    config = load_config_file(config_path)

    assert config.log_file == tmp_path / DEFAULT_LOG_FILE
