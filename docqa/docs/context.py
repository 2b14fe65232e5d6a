"""Context assembler - join ranked chunks into the prompt context."""

from docqa.models.docs import ChunkMatch

PARAGRAPH_DELIMITER = "\n\n"


def assemble_context(matches: list[ChunkMatch]) -> str:
    """Join matched chunk texts in rank order.

    An empty match list yields an empty context, meaning "no matching passages".
    """
    return PARAGRAPH_DELIMITER.join(match.chunk.text for match in matches)
