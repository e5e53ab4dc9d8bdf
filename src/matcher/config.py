"""Configuration parser for the term matcher."""

from pathlib import Path
from typing import Optional, cast

from .tokenizer import FULL_PUNCTUATIONS, NEWLINE_MARKER

DEFAULT_LOG_FILE = Path("logs/matcher.log")


class ConfigBoolParsingError(Exception):
    """Raised when the parsing of bool strings in
    the config file was not successful.
    """


class ConfigNotFoundError(Exception):
    """Raised when any of the required configuration settings is not
    provided.
    """


class MatcherConfig:
    """A class to save matcher configuration settings."""

    def __init__(
        self,
        terms_path: Path,
        punctuation: str = FULL_PUNCTUATIONS,
        newline_marker: str = NEWLINE_MARKER,
        log_queries: bool = False,
        log_file: Path = DEFAULT_LOG_FILE,
    ) -> None:
        """Initialize the matcher configuration.

        Args:
            terms_path (Path): The path to the file listing one term per line.
            punctuation (str): Punctuation characters treated as delimiters.
            newline_marker (str): The token standing for a line break in
            tokenized input.
            log_queries (bool): Whether every match call should be logged.
            log_file (Path): Where the log listener writes records.

        """
        self.terms_path = terms_path
        self.punctuation = punctuation
        self.newline_marker = newline_marker
        self.log_queries = log_queries
        self.log_file = log_file

    def __repr__(self) -> str:
        """Return a string representation of the configuration object.

        Returns:
            str: A formatted string representing the configuration settings.

        """
        return f"""
                Matcher configuration settings:
                Terms path: {self.terms_path}
                Punctuation: {self.punctuation!r}
                Newline marker: {self.newline_marker}
                Log queries: {"YES" if self.log_queries else "NO"}
                Log file: {self.log_file}
            """


def parse_bool(key: str, val: str) -> bool:
    """Parse given values into boolean ones (True or False).

    Args:
        key (str): The key to parse the boolean for.
        val (str): The value to be parsed to boolean.

    Raises:
        ConfigBoolParsingError: If an error occured
        while parsing the value to boolean.

    Returns:
        bool: True or False depending on the output of the parser.

    """
    if val.strip().lower() in {"true", "1", "yes"}:
        return True
    if val.strip().lower() in {"false", "0", "no"}:
        return False

    raise ConfigBoolParsingError(
        f"Invalid boolean value for key '{key}' in the configuration file. "
        "Expected 'true', 'false', '1', '0', 'yes', or 'no' "
        "(case-insensitive).",
    )


def load_config_file(config_file_path: Path) -> MatcherConfig:
    """Load and parse the configuration file.

    Args:
        config_file_path (Path): Path to the config file.

    Raises:
        ConfigNotFoundError: If the terms path setting is missing.
        ConfigBoolParsingError: If a boolean setting is invalid.
        FileNotFoundError: If the config file or the terms file
        does not exist.

    Returns:
        MatcherConfig: Parsed config object.

    """
    if not config_file_path.exists():
        raise FileNotFoundError(
            f"Missing required configuration file: '{config_file_path}'. "
            "Please ensure the file exists and the path is correct.",
        )

    terms_path: Optional[Path] = None
    optional: dict[str, object] = {}

    with config_file_path.open("r", encoding="utf-8") as file:
        for line in file:
            line = line.strip()

            # Skip blank lines and comments
            if not line or line.startswith("#"):
                continue

            key, sep, value = line.partition("=")
            if sep != "=":
                continue

            key = key.strip().lower()
            value = value.strip()

            if key == "terms_path":
                terms_path = Path(value)
            elif key == "punctuation":
                optional["punctuation"] = value
            elif key == "newline_marker":
                optional["newline_marker"] = value
            elif key == "log_queries":
                optional["log_queries"] = parse_bool("log_queries", value)
            elif key == "log_file":
                optional["log_file"] = Path(value)

    if terms_path is None:
        raise ConfigNotFoundError(
            "Missing required configuration: 'terms_path'. "
            "Please ensure the config file includes a valid line for "
            "'terms_path'.",
        )

    # Relative paths are resolved against the config file location
    if not terms_path.is_absolute():
        terms_path = config_file_path.parent / terms_path
    log_file = cast("Path", optional.get("log_file", DEFAULT_LOG_FILE))
    if not log_file.is_absolute():
        log_file = config_file_path.parent / log_file

    if not terms_path.exists():
        raise FileNotFoundError(
            f"The required file {terms_path} doesn't exist.",
        )

    return MatcherConfig(
        terms_path,
        punctuation=cast("str", optional.get("punctuation", FULL_PUNCTUATIONS)),
        newline_marker=cast(
            "str",
            optional.get("newline_marker", NEWLINE_MARKER),
        ),
        log_queries=cast("bool", optional.get("log_queries", False)),
        log_file=log_file,
    )
