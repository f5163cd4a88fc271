"""
Comment removal for Java-like source text.

A small character-driven state machine instead of regexes: the exact
transition table matters for inputs like ``/**/*/`` where a regex-based
stripper and this one disagree.
"""
from __future__ import annotations

import enum
from typing import List


class _State(enum.Enum):
    BASIC = "basic"
    SLASH_FOUND = "slash_found"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STAR_FOUND_IN_COMMENT = "star_found_in_comment"


def strip_comments(text: str) -> str:
    """Remove ``// ...`` and ``/* ... */`` spans, keep every other character.

    - The newline ending a line comment is consumed with the comment.
    - An unterminated block comment swallows the rest of the input.
    - A lone ``/`` (division) is emitted together with the following char.
    """
    out: List[str] = []
    state = _State.BASIC

    for ch in text:
        if state is _State.BASIC:
            if ch == "/":
                state = _State.SLASH_FOUND
            else:
                out.append(ch)

        elif state is _State.SLASH_FOUND:
            if ch == "/":
                state = _State.LINE_COMMENT
            elif ch == "*":
                state = _State.BLOCK_COMMENT
            else:
                out.append("/")
                out.append(ch)
                state = _State.BASIC

        elif state is _State.LINE_COMMENT:
            if ch in ("\n", "\r"):
                state = _State.BASIC

        elif state is _State.BLOCK_COMMENT:
            if ch == "*":
                state = _State.STAR_FOUND_IN_COMMENT

        else:  # STAR_FOUND_IN_COMMENT
            if ch == "/":
                state = _State.BASIC
            elif ch != "*":
                state = _State.BLOCK_COMMENT

    # A trailing "/" still buffered in SLASH_FOUND is dropped.
    return "".join(out)
