"""
Coarse tokenizer for comment-free Java text.

Only token *categories* matter to the chain detector. ``lex`` keeps the
matched text around for diagnostics; ``tokenize`` drops it.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, List


class Token(enum.Enum):
    PUNCTUATION = "Punctuation"
    STRING = "String"
    DOT = "Dot"
    OPEN_PAREN = "OpenParen"
    CLOSE_PAREN = "CloseParen"
    OPEN_BRACKET = "OpenBracket"
    CLOSE_BRACKET = "CloseBracket"


@dataclass(frozen=True)
class Lexeme:
    token: Token
    text: str


WHITESPACE = frozenset(" \t\n\r")
PUNCTUATION_CHARS = frozenset("*/+-%\\;,@:={}<>!~?&|^\"'")

_SINGLE_CHAR_TOKENS = {
    ".": Token.DOT,
    "(": Token.OPEN_PAREN,
    ")": Token.CLOSE_PAREN,
    "[": Token.OPEN_BRACKET,
    "]": Token.CLOSE_BRACKET,
}


def lex(text: str) -> Iterator[Lexeme]:
    """Yield lexemes in source order.

    Runs of unclassified characters (letters, digits, ``$``, ``_`` and
    anything else outside the sets above) become one STRING lexeme.
    Whitespace only separates runs.
    """
    run: List[str] = []

    for ch in text:
        if ch in WHITESPACE:
            kind = None
        elif ch in _SINGLE_CHAR_TOKENS:
            kind = _SINGLE_CHAR_TOKENS[ch]
        elif ch in PUNCTUATION_CHARS:
            kind = Token.PUNCTUATION
        else:
            run.append(ch)
            continue

        if run:
            yield Lexeme(Token.STRING, "".join(run))
            run = []
        if kind is not None:
            yield Lexeme(kind, ch)

    if run:
        yield Lexeme(Token.STRING, "".join(run))


def tokenize(text: str) -> List[Token]:
    return [lx.token for lx in lex(text)]
