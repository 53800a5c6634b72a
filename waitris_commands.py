"""Turn command text into display chunks and per-piece payloads"""
from typing import List, Tuple

from waitris_config import CONFIG, FILLER

def command_to_chunks(command: str, size: int = None) -> List[str]:
    """Split on whitespace, then cut long words into pieces of at most size chars.

    Always returns at least one chunk so any command yields a piece.
    """
    if size is None:
        size = CONFIG["CHUNK_SIZE"]
    chunks = []
    for word in command.split():
        for i in range(0, len(word), size):
            chunks.append(word[i:i + size])
    return chunks or [""]

def chunk_to_payload(chunk: str, size: int = None) -> List[Tuple[str, str]]:
    if size is None:
        size = CONFIG["CHUNK_SIZE"]
    text = chunk[:size].ljust(size, FILLER)
    if len(text) % 2:
        text += FILLER
    return [(text[i], text[i + 1]) for i in range(0, len(text), 2)]

def command_identity(command: str) -> str:
    parts = command.split()
    return parts[0] if parts else ""
