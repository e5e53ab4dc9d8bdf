import pytest

from src.matcher.fast_matcher import FastMatcher

TERMS = [
    "the bronx",
    "Bronx",
    "new",
    "New York",
    "New York City",
]


@pytest.fixture
def matcher() -> FastMatcher:
    """A matcher loaded with a small dictionary of overlapping terms."""
    fast_matcher = FastMatcher()
    fast_matcher.load_terms(TERMS)
    return fast_matcher


@pytest.fixture
def terms_file(tmp_path):
    """A term file listing one term per line, with blank lines."""
    file_path = tmp_path / "terms.txt"
    file_path.write_text(
        "The Bronx\n\nNew York\n   \nbronx\n",
        encoding="utf-8",
    )
    return file_path
