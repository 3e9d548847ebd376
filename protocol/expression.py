"""
Web-style search expressions (+/- syntax) turned into query terms.

- `+term` required, `-term` excluded, bare terms optional, `"quoted phrase"` kept whole.
- `OR` and parentheses mark a complex expression, which is passed through verbatim.
- The ideographic space (U+3000) separates terms like an ASCII space.

Examples:
  golang tutorial           -> golang OR tutorial
  +golang tutorial          -> golang AND tutorial
  golang -old               -> golang AND NOT old
  python OR ruby            -> python OR ruby (unchanged)
"""

import re
from enum import Enum
from typing import List, NamedTuple, Tuple

_WORD_BREAK = re.compile(r'[\s+\-()"]')


class TokenType(str, Enum):
    WORD = "WORD"
    QUOTED = "QUOTED"
    PLUS = "PLUS"
    MINUS = "MINUS"
    OR = "OR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"


class Token(NamedTuple):
    type: TokenType
    value: str
    position: int


_SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


class SearchExpression(NamedTuple):
    required_terms: List[str]
    excluded_terms: List[str]
    optional_terms: List[str]
    # Original text when OR/grouping is present, else ""
    raw_expression: str


def tokenize_expression(expression: str) -> List[Token]:
    text = expression.replace("　", " ")
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char.isspace():
            pos += 1
        elif char in _SINGLE_CHAR_TOKENS:
            tokens.append(Token(_SINGLE_CHAR_TOKENS[char], char, pos))
            pos += 1
        elif char == '"':
            end = text.find('"', pos + 1)
            if end < 0:
                raise ValueError(f"Unterminated quoted string at position {pos}")
            tokens.append(Token(TokenType.QUOTED, text[pos + 1 : end], pos))
            pos = end + 1
        else:
            match = _WORD_BREAK.search(text, pos)
            end = match.start() if match else len(text)
            word = text[pos:end]
            kind = TokenType.OR if word.upper() == "OR" else TokenType.WORD
            tokens.append(Token(kind, "OR" if kind is TokenType.OR else word, pos))
            pos = end
    return tokens


def _is_term(token: Token) -> bool:
    return token.type in (TokenType.WORD, TokenType.QUOTED)


def parse_search_expression(expression: str) -> SearchExpression:
    """Classify the terms of a web-style expression. Raises ValueError on malformed input."""
    if not expression or not expression.strip():
        raise ValueError("Search expression cannot be empty")
    tokens = tokenize_expression(expression)
    required: List[str] = []
    excluded: List[str] = []
    optional: List[str] = []
    complex_expr = False
    i = 0
    while i < len(tokens):
        token = tokens[i]
        following = tokens[i + 1] if i + 1 < len(tokens) else None
        if token.type is TokenType.PLUS:
            if following is not None and following.type is TokenType.LPAREN:
                complex_expr = True
            elif following is not None and _is_term(following):
                required.append(following.value)
            else:
                raise ValueError(f"Expected term after '+' at position {token.position}")
            i += 2
            continue
        if token.type is TokenType.MINUS:
            if following is None or not _is_term(following):
                raise ValueError(f"Expected term after '-' at position {token.position}")
            excluded.append(following.value)
            i += 2
            continue
        if _is_term(token):
            optional.append(token.value)
        else:
            complex_expr = True
        i += 1
    return SearchExpression(required, excluded, optional, expression if complex_expr else "")


def has_complex_expression(expr: SearchExpression) -> bool:
    return bool(expr.raw_expression) and ("OR" in expr.raw_expression or "(" in expr.raw_expression)


def to_query_string(expr: SearchExpression) -> str:
    """Boolean query string: required AND-joined, optional OR-joined unless required terms exist."""
    parts = []
    if expr.required_terms:
        parts.append(" AND ".join(expr.required_terms))
    if expr.optional_terms:
        joiner = " AND " if expr.required_terms else " OR "
        parts.append(joiner.join(expr.optional_terms))
    if expr.excluded_terms:
        parts.append(" AND ".join(f"NOT {t}" for t in expr.excluded_terms))
    return " AND ".join(parts)


def convert_search_expression(expression: str) -> str:
    expr = parse_search_expression(expression)
    if has_complex_expression(expr):
        return expr.raw_expression
    return to_query_string(expr)


def simplify_search_expression(expression: str) -> Tuple[str, List[str], List[str]]:
    """
    Reduce an expression to (main_term, and_terms, not_terms) for SEARCH/COUNT.
    OR/grouping is lost. Raises ValueError when no positive term remains.
    """
    expr = parse_search_expression(expression)
    positive = expr.required_terms + expr.optional_terms
    if not positive:
        raise ValueError("Search expression must have at least one positive term")
    return positive[0], positive[1:], list(expr.excluded_terms)
