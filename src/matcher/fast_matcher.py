"""Fast matching of multi-token terms over text and token streams.

Terms are loaded once into a `TermTrie`. Every matching call then streams its
input through a frontier of in-progress candidates, each one a trie node plus
the position where the candidate started. All matches are reported,
including nested and overlapping ones: with both "the bronx" and "bronx"
loaded, "I live in the Bronx" yields two spans.
"""

import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import IO, Any, NamedTuple, Optional, Union

from src.custom_data_structures.Trie.Trie import TermTrie, TrieNode

from .config import MatcherConfig
from .exceptions import ProcessingFailureError, ResourceUnavailableError
from .offset_position import OffsetPosition
from .tokenizer import (
    NEWLINE_MARKER,
    DelimiterPolicy,
    ScanUnit,
    reconstruct_text,
)

logger = logging.getLogger(__name__)

TokenPair = tuple[str, Any]


class _Candidate(NamedTuple):
    node: TrieNode
    start: int
    last_end: int


class FastMatcher:
    """Match a dictionary of word sequences against text."""

    def __init__(
        self,
        policy: Optional[DelimiterPolicy] = None,
        newline_marker: str = NEWLINE_MARKER,
    ) -> None:
        """Initialize an empty matcher.

        Args:
            policy (Optional[DelimiterPolicy]): The delimiter policy used for
            both loading and matching. Defaults to the full punctuation set.
            newline_marker (str): The token rendered as an empty string when
            a token list is reconstructed into text.

        """
        self.policy = policy if policy is not None else DelimiterPolicy()
        self.newline_marker = newline_marker
        self._trie = TermTrie()

    @classmethod
    def from_terms(cls, terms: Iterable[str]) -> "FastMatcher":
        """Build a matcher from an iterable of raw term strings."""
        matcher = cls()
        matcher.load_terms(terms)
        return matcher

    @classmethod
    def from_stream(cls, stream: IO[Any]) -> "FastMatcher":
        """Build a matcher from a newline-delimited term stream."""
        matcher = cls()
        matcher.load_terms_from_stream(stream)
        return matcher

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FastMatcher":
        """Build a matcher from a file listing one term per line."""
        matcher = cls()
        matcher.load_terms_from_file(path)
        return matcher

    @classmethod
    def from_config(cls, config: MatcherConfig) -> "FastMatcher":
        """Build a matcher from parsed configuration settings."""
        matcher = cls(
            DelimiterPolicy(config.punctuation),
            config.newline_marker,
        )
        matcher.load_terms_from_file(config.terms_path)
        return matcher

    @property
    def term_count(self) -> int:
        """The number of distinct terms loaded so far."""
        return len(self._trie)

    @property
    def trie(self) -> TermTrie:
        """The underlying term trie, read-only once loading is done."""
        return self._trie

    # --- Loading ---

    def load_term(self, term: str) -> int:
        """Load a single term into the matcher.

        Args:
            term (str): The raw term, possibly made of several tokens.

        Returns:
            int: 1 if the term produced at least one token, 0 otherwise.

        """
        if not term or term.isspace():
            return 0
        tokens = self.policy.split_term(term)
        if not tokens:
            return 0
        self._trie.insert(tokens)
        return 1

    def load_terms(self, terms: Iterable[str]) -> int:
        """Load a sequence of raw terms.

        Terms read before a failure stay loaded.

        Args:
            terms (Iterable[str]): The raw term strings.

        Raises:
            ProcessingFailureError: If reading the term source fails.

        Returns:
            int: The number of terms inserted, duplicates included.

        """
        nb_terms = 0
        try:
            for term in terms:
                nb_terms += self.load_term(term)
        except (OSError, UnicodeDecodeError) as e:
            raise ProcessingFailureError(
                f"Failed to read the term source after {nb_terms} terms: {e!s}",
            ) from e

        logger.info(
            "Loaded %d terms (%d distinct in the matcher)",
            nb_terms,
            self.term_count,
        )
        return nb_terms

    def load_terms_from_stream(self, stream: IO[Any]) -> int:
        """Load terms from a newline-delimited stream, one term per line.

        Args:
            stream (IO): A binary stream of UTF-8 text, or a text stream.

        Raises:
            ProcessingFailureError: If reading or decoding the stream fails.

        Returns:
            int: The number of terms inserted.

        """
        return self.load_terms(_iter_lines(stream))

    def load_terms_from_file(self, path: Union[str, Path]) -> int:
        """Load terms from a file listing one term per line.

        Args:
            path (Union[str, Path]): The path of the term file.

        Raises:
            ResourceUnavailableError: If the file does not exist or cannot
            be read.
            ProcessingFailureError: If reading the file fails part way.

        Returns:
            int: The number of terms inserted.

        """
        path = Path(path)
        if not path.is_file():
            raise ResourceUnavailableError(
                "Cannot add terms to matcher, because file "
                f"'{path.absolute()}' does not exist.",
            )
        if not os.access(path, os.R_OK):
            raise ResourceUnavailableError(
                "Cannot add terms to matcher, because cannot read file "
                f"'{path.absolute()}'.",
            )

        try:
            file = path.open("rb")
        except OSError as e:
            raise ResourceUnavailableError(
                f"Cannot open term file '{path.absolute()}': {e!s}",
            ) from e

        with file:
            return self.load_terms_from_stream(file)

    # --- Matching ---

    def match_text(self, text: str) -> list[OffsetPosition]:
        """Identify terms in a piece of text.

        Args:
            text (str): The text to be processed.

        Returns:
            list[OffsetPosition]: Character spans of the matches, so that
            `text[start:end]` is the matched text. Empty if nothing matched.

        """
        if not text:
            return []
        return self._scan(self.policy.iter_text_units(text))

    def match_text_word_positions(self, text: str) -> list[OffsetPosition]:
        """Identify terms in a piece of text and report word positions.

        Words, markup units and delimiter characters other than the space
        each take one position, so spans count words instead of characters.

        Args:
            text (str): The text to be processed.

        Returns:
            list[OffsetPosition]: Inclusive word position spans of the
            matches. Empty if nothing matched.

        """
        if not text:
            return []
        return self._scan(self.policy.iter_word_position_units(text))

    def match_tokens(self, tokens: Sequence[str]) -> list[OffsetPosition]:
        """Identify terms in an already tokenized text.

        Args:
            tokens (Sequence[str]): The tokens to be processed.

        Returns:
            list[OffsetPosition]: Inclusive token index spans of the matches.

        """
        return self._scan(self.policy.iter_token_units(tokens))

    def match_token_pairs(
        self,
        pairs: Sequence[TokenPair],
    ) -> list[OffsetPosition]:
        """Identify terms in a tokenized text whose tokens carry labels.

        Only the token half of each pair is matched; labels are ignored.
        """
        return self.match_tokens([token for token, _label in pairs])

    def match_reconstructed_tokens(
        self,
        tokens: Sequence[str],
    ) -> list[OffsetPosition]:
        """Rebuild a text from tokens and match it in character mode.

        The returned offsets refer to the reconstructed text, not to token
        indices. Use `match_tokens` for token indices.
        """
        return self.match_text(reconstruct_text(tokens, self.newline_marker))

    def match_reconstructed_pairs(
        self,
        pairs: Sequence[TokenPair],
    ) -> list[OffsetPosition]:
        """Same as `match_reconstructed_tokens` over labeled token pairs."""
        return self.match_reconstructed_tokens(
            [token for token, _label in pairs],
        )

    def match_reconstructed_word_positions(
        self,
        tokens: Sequence[str],
    ) -> list[OffsetPosition]:
        """Rebuild a text from tokens and report word positions in it.

        Newline markers vanish from the rebuilt text, so positions can lag
        behind the token indices of `match_tokens`.
        """
        return self.match_text_word_positions(
            reconstruct_text(tokens, self.newline_marker),
        )

    def match(
        self,
        value: Union[str, Iterable[str], Iterable[TokenPair]],
    ) -> list[OffsetPosition]:
        """Dispatch to the matching mode suited to the input type.

        A string is matched in character mode, pairs on their token half,
        and any other iterable of tokens in token-index mode.
        """
        if isinstance(value, str):
            return self.match_text(value)
        items = value if isinstance(value, Sequence) else list(value)
        if not items:
            return []
        if isinstance(items[0], (tuple, list)):
            return self.match_token_pairs(items)  # type: ignore[arg-type]
        return self.match_tokens(items)  # type: ignore[arg-type]

    def extract(self, text: str) -> list[str]:
        """Return the matched substrings of a text, in match order."""
        return [text[pos.start : pos.end] for pos in self.match_text(text)]

    def _scan(self, units: Iterable[ScanUnit]) -> list[OffsetPosition]:
        """Stream units through the frontier of in-progress candidates."""
        results: list[OffsetPosition] = []
        if self._trie.is_empty():
            return results

        root = self._trie.root
        frontier: list[_Candidate] = []
        for unit in units:
            token = unit.token
            # Delimiters and markup occupy position but never match
            if token is None:
                continue

            next_frontier: list[_Candidate] = []
            for candidate in frontier:
                child = TermTrie.lookup(candidate.node, token)
                if child is not None:
                    next_frontier.append(
                        _Candidate(child, candidate.start, unit.end),
                    )
                # A term ended on the previous token
                if candidate.node.is_terminal:
                    results.append(
                        OffsetPosition(candidate.start, candidate.last_end),
                    )

            # Start a new candidate at the current token
            child = TermTrie.lookup(root, token)
            if child is not None:
                next_frontier.append(_Candidate(child, unit.start, unit.end))

            frontier = next_frontier

        # Flush the candidates that end with the input
        for candidate in frontier:
            if candidate.node.is_terminal:
                results.append(
                    OffsetPosition(candidate.start, candidate.last_end),
                )

        logger.debug("Scan produced %d matches", len(results))
        return results


def _iter_lines(stream: IO[Any]) -> Iterator[str]:
    """Yield the non-empty lines of a binary or text stream."""
    for line in stream:
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        line = line.rstrip("\r\n")
        if line:
            yield line
