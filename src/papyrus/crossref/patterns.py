"""
Module: crossref.patterns

Purpose:
    Recognition of cross-reference candidates in documentation text.
    Splits text into plain segments and reference tokens.

Patterns:
    - Conservative (default): namespaces (``Foo``, ``Foo::Bar``, ``::Foo``),
      qualified methods (``Foo#bar``, ``Foo::bar``, ``Foo.bar``) and
      prefixed methods (``#bar``, ``::bar``). A leading backslash escapes
      the reference.
    - Permissive (hyperlink_all): additionally any bare identifier such as
      ``new`` or ``each_pair?``.
    - Explicit: ``rdoc-ref:TARGET``. The target is taken verbatim.

Key Functions:
    - scan(): Tokenize text into TEXT / CROSSREF / RDOC_REF tokens

Dependencies:
    - re (std)

Used By:
    - crossref.formatter: format_text()
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Pattern

# Namespace name: Foo, Foo::Bar, ::Foo
CLASS_PATTERN = r"(?:::)?[A-Z]\w*(?:::\w+)*"

# Method name, including operator methods
METHOD_PATTERN = (
    r"(?:[a-z_]\w*[!?=]?"
    r"|\[\]=?|<=>|===?|=~|<<|>>|\*\*|[-+]@|[-+*/%<>~!])"
)

# Parenthesised argument list allowed after a method name: Foo#bar(a, b)
ARGS_PATTERN = r"(?:\([\w.,+*/=<> -]*\))?"

_CONSERVATIVE_BODY = (
    rf"{CLASS_PATTERN}(?:[.#]|::){METHOD_PATTERN}{ARGS_PATTERN}"
    rf"|(?:\#|::){METHOD_PATTERN}{ARGS_PATTERN}"
    rf"|{CLASS_PATTERN}"
)

_PERMISSIVE_BODY = _CONSERVATIVE_BODY + r"|[a-z_]\w*[!?=]?"

# Candidates must start at a word boundary and must not run into more name text
_LEAD = r"(?<![\w#:\\])"
_TRAIL = r"(?![\w#]|::\w|=\w)"

RDOC_REF_PATTERN = r"rdoc-ref:(?P<target>(?:\S*[\w?!=\]])?)"

CROSSREF_REGEXP: Pattern[str] = re.compile(
    rf"{_LEAD}(?P<crossref>\\?(?:{_CONSERVATIVE_BODY})){_TRAIL}"
)
ALL_CROSSREF_REGEXP: Pattern[str] = re.compile(
    rf"{_LEAD}(?P<crossref>\\?(?:{_PERMISSIVE_BODY})){_TRAIL}"
)

_COMBINED_CONSERVATIVE = re.compile(
    rf"(?P<rdocref>{RDOC_REF_PATTERN})|{CROSSREF_REGEXP.pattern}"
)
_COMBINED_PERMISSIVE = re.compile(
    rf"(?P<rdocref>{RDOC_REF_PATTERN})|{ALL_CROSSREF_REGEXP.pattern}"
)

# Words the lowercase heuristic treats as ordinary prose
LOWERCASE_WORD_REGEXP: Pattern[str] = re.compile(r"[a-z]+")


class TokenKind(Enum):
    """Kind of a scanned text segment."""
    TEXT = "text"
    CROSSREF = "crossref"
    RDOC_REF = "rdoc_ref"


@dataclass(frozen=True)
class Token:
    """
    Segment of scanned text.

    Attributes:
        kind: Segment kind
        text: Exact source text of the segment
        target: For RDOC_REF tokens, the text after ``rdoc-ref:``
    """
    kind: TokenKind
    text: str
    target: str = ""


def is_lowercase_word(text: str) -> bool:
    """True for all-lowercase words with no punctuation ("new", "each")."""
    return LOWERCASE_WORD_REGEXP.fullmatch(text) is not None


def scan(text: str, hyperlink_all: bool = False) -> Iterator[Token]:
    """
    Split text into plain segments and reference candidates.

    Concatenating the ``text`` of all yielded tokens reproduces the input.

    Args:
        text: Documentation text
        hyperlink_all: Use the permissive pattern

    Yields:
        Tokens in source order

    Example:
        >>> [t.kind.value for t in scan("See Bbb for details.")]
        ['crossref', 'text', 'crossref', 'text']
    """
    pattern = _COMBINED_PERMISSIVE if hyperlink_all else _COMBINED_CONSERVATIVE
    position = 0
    for match in pattern.finditer(text):
        if match.start() > position:
            yield Token(TokenKind.TEXT, text[position:match.start()])
        if match.group("rdocref") is not None:
            yield Token(TokenKind.RDOC_REF, match.group(0), match.group("target"))
        else:
            yield Token(TokenKind.CROSSREF, match.group("crossref"))
        position = match.end()
    if position < len(text):
        yield Token(TokenKind.TEXT, text[position:])

