"""Response-length governance: summarize long answers, keep the full text."""

from knowledge_clone.core import ChatTurn

ELLIPSIS = "..."


def count_words(text: str) -> int:
    return len(text.split())


def gate(response_text: str, threshold: int) -> ChatTurn:
    """Split a response into what to display and what to keep for expansion.

    Responses longer than ``threshold`` words are cut to their first
    ``threshold // 2`` words plus an ellipsis. The cut is purely word based
    and may end mid-sentence.

    Args:
        response_text: Raw completion text
        threshold: Word count above which the response is summarized, >= 1

    Returns:
        ChatTurn with ``full_content`` set only when summarized
    """
    if threshold < 1:
        raise ValueError(f"Summarize threshold must be positive, got {threshold}")

    words = response_text.split()
    if len(words) <= threshold:
        return ChatTurn(display_content=response_text)

    summary = " ".join(words[: threshold // 2]) + ELLIPSIS
    return ChatTurn(display_content=summary, full_content=response_text, is_summarized=True)
