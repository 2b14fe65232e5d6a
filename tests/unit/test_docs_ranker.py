"""Unit tests for relevance ranker."""

import pytest

from docqa.docs.chunker import chunk_text
from docqa.docs.ranker import (
    SubstringScorer,
    TokenOverlapScorer,
    get_scorer,
    normalize_text,
    rank_chunks,
)
from docqa.models.docs import Chunk


@pytest.fixture
def policy_chunks(sample_policy: str) -> list[Chunk]:
    return chunk_text(sample_policy, chunk_size=40)


def test_substring_match_returns_only_matching_chunk(policy_chunks: list[Chunk]) -> None:
    """Test that only the chunk containing the question is returned."""
    matches = rank_chunks(policy_chunks, "knee surgery")

    assert [m.chunk.index for m in matches] == [0]
    assert matches[0].score == 1.0


def test_substring_is_case_insensitive(policy_chunks: list[Chunk]) -> None:
    """Test that question and chunk case do not matter."""
    matches = rank_chunks(policy_chunks, "DENTAL")

    assert [m.chunk.index for m in matches] == [1]


def test_full_question_has_no_substring_match(policy_chunks: list[Chunk]) -> None:
    """Test that a full sentence question is not a literal substring of any chunk."""
    assert rank_chunks(policy_chunks, "Is knee surgery covered?") == []


def test_token_overlap_matches_full_question(policy_chunks: list[Chunk]) -> None:
    """Test that token overlap finds the knee surgery chunk for a natural question."""
    matches = rank_chunks(policy_chunks, "Is knee surgery covered?", scorer=TokenOverlapScorer())

    assert [m.chunk.index for m in matches] == [0]
    assert matches[0].score == 3.0


def test_zero_score_chunks_are_excluded() -> None:
    """Test that unrelated chunks never appear in the result."""
    chunks = [Chunk(index=0, text="apples"), Chunk(index=1, text="oranges")]

    assert rank_chunks(chunks, "bananas") == []


def test_ties_break_by_index() -> None:
    """Test that equal scores keep document order regardless of input order."""
    chunks = [
        Chunk(index=2, text="refund policy C"),
        Chunk(index=0, text="refund policy A"),
        Chunk(index=1, text="refund policy B"),
    ]

    matches = rank_chunks(chunks, "refund policy")

    assert [m.chunk.index for m in matches] == [0, 1, 2]


def test_higher_scores_rank_first() -> None:
    """Test that token overlap orders by score descending."""
    chunks = [
        Chunk(index=0, text="premium amounts"),
        Chunk(index=1, text="annual premium deductible amounts"),
        Chunk(index=2, text="deductible"),
    ]

    matches = rank_chunks(
        chunks, "annual premium deductible", scorer=TokenOverlapScorer(), top_k=3
    )

    assert [m.chunk.index for m in matches] == [1, 0, 2]
    assert [m.score for m in matches] == [3.0, 1.0, 1.0]


def test_top_k_limits_results() -> None:
    """Test that at most top_k matches are returned."""
    chunks = [Chunk(index=i, text=f"claim form {i}") for i in range(6)]

    matches = rank_chunks(chunks, "claim form", top_k=3)

    assert [m.chunk.index for m in matches] == [0, 1, 2]


def test_ranking_is_deterministic(policy_chunks: list[Chunk]) -> None:
    """Test that repeated runs give identical output."""
    first = rank_chunks(policy_chunks, "section")
    second = rank_chunks(policy_chunks, "section")

    assert first == second
    assert [m.chunk.index for m in first] == [0, 1]


@pytest.mark.parametrize("question", ["", "   ", "\n\t"])
def test_empty_question_matches_nothing(policy_chunks: list[Chunk], question: str) -> None:
    """Test that an empty question never matches every chunk."""
    assert rank_chunks(policy_chunks, question) == []
    assert rank_chunks(policy_chunks, question, scorer=TokenOverlapScorer()) == []


def test_stopword_only_question_scores_zero() -> None:
    """Test that a question made only of function words has no overlap terms."""
    chunk = Chunk(index=0, text="what is the plan")

    assert TokenOverlapScorer().score(chunk, "what is the") == 0.0


def test_normalize_text_folds_case_and_whitespace() -> None:
    """Test NFKC, casefold and whitespace collapse."""
    assert normalize_text("  Straße\n\n  ＣＯＶＥＲＡＧＥ\t") == "strasse coverage"


def test_substring_matches_across_line_breaks() -> None:
    """Test that whitespace differences between question and chunk are ignored."""
    chunk = Chunk(index=0, text="Knee\nsurgery is covered")

    assert SubstringScorer().score(chunk, "knee surgery") == 1.0


def test_get_scorer_resolves_names() -> None:
    """Test scorer factory."""
    assert isinstance(get_scorer("substring"), SubstringScorer)
    assert isinstance(get_scorer("token_overlap"), TokenOverlapScorer)

    with pytest.raises(ValueError, match="Unknown ranker scorer"):
        get_scorer("bm25")
