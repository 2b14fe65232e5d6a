"""Relevance ranker - score chunks against a question and keep the top K."""

import re
import unicodedata
from typing import Protocol

from docqa.models.docs import Chunk, ChunkMatch

_WHITESPACE_RE = re.compile(r"\s+")
_TERM_RE = re.compile(r"\w+")

# Function words that carry no retrieval signal for token overlap
STOPWORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "can", "do", "does",
        "for", "from", "how", "i", "if", "in", "is", "it", "my", "of", "on",
        "or", "the", "this", "to", "under", "was", "what", "when", "where",
        "which", "who", "why", "will", "with",
    }
)  # fmt: skip


def normalize_text(text: str) -> str:
    """Normalize text into a case-insensitive comparable form.

    NFKC-normalizes, casefolds, collapses whitespace runs to a single space
    and strips the ends.
    """
    folded = unicodedata.normalize("NFKC", text).casefold()
    return _WHITESPACE_RE.sub(" ", folded).strip()


class RelevanceScorer(Protocol):
    """Scores one chunk against a question. Zero means irrelevant."""

    def score(self, chunk: Chunk, question: str) -> float:
        ...


class SubstringScorer:
    """Binary policy: 1.0 if the normalized question occurs in the chunk, else 0.0."""

    def score(self, chunk: Chunk, question: str) -> float:
        needle = normalize_text(question)
        if not needle:
            return 0.0
        return 1.0 if needle in normalize_text(chunk.text) else 0.0


class TokenOverlapScorer:
    """Counts distinct non-stopword question terms present in the chunk."""

    def __init__(self, stopwords: frozenset[str] = STOPWORDS) -> None:
        self._stopwords = stopwords

    def terms(self, text: str) -> set[str]:
        return {
            term for term in _TERM_RE.findall(normalize_text(text)) if term not in self._stopwords
        }

    def score(self, chunk: Chunk, question: str) -> float:
        query_terms = self.terms(question)
        if not query_terms:
            return 0.0
        return float(len(query_terms & self.terms(chunk.text)))


def get_scorer(name: str) -> RelevanceScorer:
    """Resolve a configured scorer name."""
    if name == "substring":
        return SubstringScorer()
    if name == "token_overlap":
        return TokenOverlapScorer()
    raise ValueError(f"Unknown ranker scorer: {name}")


def rank_chunks(
    chunks: list[Chunk],
    question: str,
    *,
    scorer: RelevanceScorer | None = None,
    top_k: int = 3,
) -> list[ChunkMatch]:
    """Rank chunks by relevance to a question.

    Scoring strategy:
    - Score every chunk with the scorer (substring match by default)
    - Filter out chunks with score = 0
    - Sort by score descending, then by chunk index (for determinism)
    - Apply top_k

    Args:
        chunks: Document chunks in any order
        question: Natural-language question
        scorer: Relevance scorer (default SubstringScorer)
        top_k: Maximum number of matches to return

    Returns:
        List of ChunkMatch sorted by relevance (descending score)
    """
    if scorer is None:
        scorer = SubstringScorer()

    scored: list[ChunkMatch] = []
    for chunk in chunks:
        score = scorer.score(chunk, question)
        if score > 0:
            scored.append(ChunkMatch(chunk=chunk, score=score))

    scored.sort(key=lambda match: (-match.score, match.chunk.index))

    return scored[:top_k]
