"""Delimiter policy and token sources for the term matcher.

The tokenizer turns raw text, or an already tokenized sequence, into a lazy
stream of `ScanUnit` objects. Every unit occupies a position; only units that
carry a token take part in matching. Delimiter runs and markup units such as
`<b>` or `</tag>` keep their width so offsets stay aligned with the input.
"""

import re
from collections.abc import Iterable, Iterator
from typing import NamedTuple, Optional

WHITESPACE = " \n\t"

FULL_PUNCTUATIONS = (
    "(（[ •*,:;?.!/)）-−–‐«»„"
    "\"“”‘’'`$#@]*"
    "\u2666\u2665\u2663\u2660\u00a0"
)

NEWLINE_MARKER = "@newline"


class ScanUnit(NamedTuple):
    """One positional unit of a token source.

    `token` is None for delimiter and markup units. `start` is the position
    of the unit and `end` the position recorded as the end of a match that
    finishes on this unit.
    """

    token: Optional[str]
    start: int
    end: int


def normalize(token: str) -> str:
    """Case-fold a token before it is used as a trie edge label."""
    return token.lower()


def is_markup(token: str) -> bool:
    """Return True for a token wholly enclosed in angle brackets."""
    return len(token) >= 2 and token[0] == "<" and token[-1] == ">"


class DelimiterPolicy:
    """Split text into match-eligible tokens on a fixed delimiter set."""

    def __init__(self, punctuation: str = FULL_PUNCTUATIONS) -> None:
        """Initialize the delimiter policy.

        Args:
            punctuation (str): Punctuation characters acting as delimiters
            in addition to space, tab and newline.

        """
        self.delimiters = WHITESPACE + "".join(
            char for char in punctuation if char not in WHITESPACE
        )
        delimiter_class = "".join(re.escape(char) for char in self.delimiters)
        self._term_splitter = re.compile(f"[{delimiter_class}]+")
        # Markup first, then delimiter runs, then words. Markup never spans
        # whitespace, and a "<" that does not open a markup unit belongs to
        # the surrounding word.
        self._text_scanner = re.compile(
            rf"(?P<markup><[^<>\s]+>)"
            rf"|(?P<delimiters>[{delimiter_class}]+)"
            rf"|(?P<word>(?:[^{delimiter_class}<]|<(?![^<>\s]+>))+)",
        )

    def is_delimiter(self, token: str) -> bool:
        """Return True if the token is empty or made of delimiters only."""
        return all(char in self.delimiters for char in token)

    def split_term(self, term: str) -> list[str]:
        """Split a raw term string into its lowercased tokens.

        Args:
            term (str): The raw term, possibly multi-token.

        Returns:
            list[str]: The non-empty tokens, an empty list for a blank term.

        """
        return [
            normalize(fragment)
            for fragment in self._term_splitter.split(term)
            if fragment
        ]

    def iter_text_units(self, text: str) -> Iterator[ScanUnit]:
        """Yield character-offset units for a raw text.

        Word units report the offset just past their last character as
        `end`, so a match spans `text[start:end]`.
        """
        for found in self._text_scanner.finditer(text):
            start, end = found.span()
            word = found.group("word")
            if word is None:
                yield ScanUnit(None, start, end)
            else:
                yield ScanUnit(normalize(word), start, end)

    def iter_word_position_units(self, text: str) -> Iterator[ScanUnit]:
        """Yield word-position units for a raw text.

        Positions count words rather than characters. A word or a markup
        unit takes one position, and so does every delimiter character
        except the space, which takes none. A match ending on a word reports
        that word's position as `end`.

        Args:
            text (str): The text to be processed.

        Returns:
            Iterator[ScanUnit]: One unit per word, markup unit or delimiter
            run.

        """
        position = 0
        for found in self._text_scanner.finditer(text):
            word = found.group("word")
            if word is not None:
                yield ScanUnit(normalize(word), position, position)
                position += 1
                continue
            yield ScanUnit(None, position, position)
            delimiters = found.group("delimiters")
            if delimiters is None:
                position += 1
            else:
                position += len(delimiters) - delimiters.count(" ")

    def iter_token_units(self, tokens: Iterable[str]) -> Iterator[ScanUnit]:
        """Yield token-index units, one position per token."""
        for index, token in enumerate(tokens):
            if self.is_delimiter(token) or is_markup(token):
                yield ScanUnit(None, index, index)
            else:
                yield ScanUnit(normalize(token), index, index)


def reconstruct_token(token: str, newline_marker: str = NEWLINE_MARKER) -> str:
    """Render a single token for text reconstruction.

    The newline marker renders as the empty string. Any other token renders
    as one space followed by the token cut at its first space, or at its
    first tab when it has no space.
    """
    if token.strip() == newline_marker:
        return ""
    cut = token.find(" ")
    if cut == -1:
        cut = token.find("\t")
    if cut == -1:
        return " " + token
    return " " + token[:cut]


def reconstruct_text(
    tokens: Iterable[str],
    newline_marker: str = NEWLINE_MARKER,
) -> str:
    """Concatenate the reconstructed rendering of every token."""
    return "".join(reconstruct_token(token, newline_marker) for token in tokens)
