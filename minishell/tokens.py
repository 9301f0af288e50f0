"""Lexer tokens and the small predicates and skips the parser uses on them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class TokenType(Enum):
    """Kind of a lexed token."""

    WORD = "word"
    SPACE = " "
    PIPE = "|"
    REDIR_IN = "<"
    REDIR_OUT = ">"
    DREDIR_OUT = ">>"
    HERE_DOC = "<<"
    DOUBLE_QUOTE = '"'
    SINGLE_QUOTE = "'"
    ENV = "$"


class State(Enum):
    """Quoting context a token was read in."""

    GENERAL = "general"
    DOUBLE = "double"
    SINGLE = "single"


@dataclass
class Token:
    """One token: its text, its kind and its quoting state."""

    content: str
    type: TokenType
    state: State = State.GENERAL

    @property
    def is_general(self) -> bool:
        return self.state is State.GENERAL


_QUOTES = frozenset({TokenType.DOUBLE_QUOTE, TokenType.SINGLE_QUOTE})
_REDIRECTIONS = frozenset(
    {TokenType.REDIR_IN, TokenType.REDIR_OUT, TokenType.DREDIR_OUT, TokenType.HERE_DOC}
)
_NOT_WORD_LIKE = frozenset(
    {
        TokenType.SPACE,
        TokenType.WORD,
        TokenType.ENV,
        TokenType.SINGLE_QUOTE,
        TokenType.DOUBLE_QUOTE,
        TokenType.HERE_DOC,
    }
)


def is_word_like(token: Token) -> bool:
    """Return True unless the token is a space, word, variable, quote or here-doc marker."""
    return token.type not in _NOT_WORD_LIKE


def is_redirection(token: Token) -> bool:
    """Return True for <, >, >> and << tokens."""
    return token.type in _REDIRECTIONS


def is_quote(token: Token) -> bool:
    """Return True for single and double quote tokens."""
    return token.type in _QUOTES


def skip_spaces(tokens: Sequence[Token], pos: int) -> int:
    """Return the position of the first non-space token at or after pos."""
    while pos < len(tokens) and tokens[pos].type is TokenType.SPACE:
        pos += 1
    return pos


def _skip_quotes(tokens: Sequence[Token], pos: int) -> int:
    while pos < len(tokens) and is_quote(tokens[pos]):
        pos += 1
    return pos


def skip_quoted_run(tokens: Sequence[Token], pos: int) -> int:
    """Skip opening quotes, the quoted tokens inside them and the closing quotes."""
    pos = _skip_quotes(tokens, pos)
    while pos < len(tokens) and not tokens[pos].is_general:
        pos += 1
    return _skip_quotes(tokens, pos)


def skip_word_run(tokens: Sequence[Token], pos: int) -> int:
    """Skip quotes and leading spaces, then a run of words, variables, quotes and quoted spaces."""
    pos = _skip_quotes(tokens, pos)
    pos = skip_spaces(tokens, pos)
    while pos < len(tokens):
        token = tokens[pos]
        if token.type in (TokenType.WORD, TokenType.ENV) or is_quote(token):
            pos += 1
        elif token.type is TokenType.SPACE and not token.is_general:
            pos += 1
        else:
            break
    return _skip_quotes(tokens, pos)