from __future__ import annotations

from typing import Dict, List

from .chains import detect_chain_lengths
from .comments import strip_comments
from .histogram import build_histogram
from .tokenizer import tokenize


def method_chain_counts(source_text: str) -> List[int]:
    """Chain lengths of one source file: strip comments, tokenize, detect."""
    return detect_chain_lengths(tokenize(strip_comments(source_text)))


def method_chain_histogram(source_text: str) -> Dict[int, int]:
    return build_histogram(method_chain_counts(source_text))
