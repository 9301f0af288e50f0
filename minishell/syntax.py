"""Detection of syntax errors in a token list."""

from __future__ import annotations

from typing import Sequence

from .tokens import Token, TokenType, is_quote, is_redirection, is_word_like, skip_spaces


def _next_check(tokens: Sequence[Token], pos: int) -> int:
    n = len(tokens)
    if pos >= n:
        return pos
    token = tokens[pos]
    if not token.is_general:
        kind = is_word_like(token)
        while pos < n and not tokens[pos].is_general and is_word_like(tokens[pos]) == kind:
            pos += 1
    else:
        pos += 1
    return pos


def _check_between(tokens: Sequence[Token], pos: int) -> bool:
    n = len(tokens)
    while pos < n:
        pos = skip_spaces(tokens, pos)
        if pos < n and is_redirection(tokens[pos]) and tokens[pos].is_general:
            pos = skip_spaces(tokens, pos + 1)
            if pos >= n:
                return True
            nxt = tokens[pos]
            if (is_redirection(nxt) or nxt.type is TokenType.PIPE) and nxt.is_general:
                return True
        elif pos < n and tokens[pos].type is TokenType.PIPE and tokens[pos].is_general:
            pos = skip_spaces(tokens, pos + 1)
            if pos >= n:
                return True
            if tokens[pos].type is TokenType.PIPE and tokens[pos].is_general:
                return True
        else:
            pos = _next_check(tokens, pos)
    return False


def has_syntax_error(tokens: Sequence[Token]) -> bool:
    """Return True if the tokens contain a misplaced pipe or redirection."""
    if not tokens:
        return False
    start = skip_spaces(tokens, 0)
    if start < len(tokens):
        first = tokens[start]
        is_last = start == len(tokens) - 1
        if first.type is TokenType.PIPE:
            return True
        if is_last and first.type not in (TokenType.SPACE, TokenType.WORD, TokenType.ENV):
            return True
        if is_last and is_quote(first):
            return True
    if _check_between(tokens, start):
        return True
    return tokens[-1].type is TokenType.PIPE