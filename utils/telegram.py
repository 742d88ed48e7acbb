#!/usr/bin/env python3
"""
Telegram utilities for outgoing message text
"""

from typing import List

# Bot API limit for sendMessage text
MAX_MESSAGE_LENGTH = 4096


def split_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """
    Split long text into chunks that fit Telegram's limit

    Lines are kept whole where possible; a line longer than the limit is
    split on word boundaries, and a single word longer than the limit is
    cut into fixed-size pieces.

    Args:
        text: Text to split
        max_length: Maximum length per chunk

    Returns:
        List of non-empty chunks (a single chunk if the text already fits)
    """
    if len(text) <= max_length:
        return [text]

    chunks = []
    current = ""

    def flush():
        nonlocal current
        if current.strip():
            chunks.append(current.strip())
        current = ""

    for line in text.split('\n'):
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) <= max_length:
            current = candidate
            continue

        flush()
        if len(line) <= max_length:
            current = line
            continue

        # Line is too long on its own - fall back to words
        for word in line.split():
            while len(word) > max_length:
                flush()
                chunks.append(word[:max_length])
                word = word[max_length:]
            candidate = f"{current} {word}" if current else word
            if len(candidate) > max_length:
                flush()
                current = word
            else:
                current = candidate

    flush()
    return chunks
