"""Document chunker - deterministic fixed-size text splitting."""

from docqa.models.docs import Chunk


def chunk_text(text: str, *, chunk_size: int = 1000) -> list[Chunk]:
    """Split document text into ordered, fixed-size chunks.

    Pure function with no I/O or randomness.

    Args:
        text: Extracted document text
        chunk_size: Characters per chunk (default 1000)

    Returns:
        List of Chunk where:
        - index is 0-based, strictly increasing
        - every chunk except possibly the last has exactly chunk_size characters
        - concatenating chunk texts in index order reproduces text exactly

    Raises:
        ValueError: If chunk_size is not positive
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    return [
        Chunk(index=index, text=text[start : start + chunk_size])
        for index, start in enumerate(range(0, len(text), chunk_size))
    ]
