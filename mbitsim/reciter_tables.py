"""Character classes and symbol rules of the text-to-phoneme reciter."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class CharFlag(enum.IntFlag):
    """Classes a character of the input text belongs to."""

    DIGIT = 0x01
    PUNCTUATION = 0x02  # handled by the symbol rules
    CORONAL = 0x04
    VOICED = 0x08
    SIBILANT = 0x10
    CONSONANT = 0x20
    VOWEL = 0x40
    LETTER = 0x80


_CHAR_FLAGS = (
    0, 0, 0, 0, 0, 0, 0, 0,
    0, 0, 0, 0, 0, 0, 0, 0,
    0, 0, 0, 0, 0, 0, 0, 0,
    0, 0, 0, 0, 0, 0, 0, 0,
    0, 2, 2, 2, 2, 2, 2, 130,
    0, 0, 2, 2, 2, 2, 2, 2,
    3, 3, 3, 3, 3, 3, 3, 3,
    3, 3, 2, 2, 2, 2, 2, 2,
    2, 192, 168, 176, 172, 192, 160, 184,
    160, 192, 188, 160, 172, 168, 172, 192,
    160, 160, 172, 180, 164, 192, 168, 168,
    176, 192, 188, 0, 0, 0, 2, 0,
    32, 32, 155, 32, 192, 185, 32, 205,
    163, 76, 138, 142,
)


def char_flags(char: str) -> CharFlag:
    """The classes of a single character; characters past the table have none."""
    if not isinstance(char, str) or len(char) != 1:
        raise ValueError("expected a single character")
    code = ord(char)
    return CharFlag(_CHAR_FLAGS[code] if code < len(_CHAR_FLAGS) else 0)


@dataclass(frozen=True)
class Rule:
    """A rewrite rule ``prefix(match)suffix=output``."""

    prefix: str
    match: str
    suffix: str
    output: str

    def __str__(self) -> str:
        return f"{self.prefix}({self.match}){self.suffix}={self.output}"


def parse_rule(text: str) -> Rule:
    """Parse a rule written as ``prefix(match)suffix=output``."""
    open_at = text.find("(")
    if open_at < 0:
        raise ValueError(f"rule has no '(': {text!r}")
    close_at = text.find(")", open_at + 1)
    if close_at < 0:
        raise ValueError(f"rule has no ')': {text!r}")
    if close_at == open_at + 1:
        raise ValueError(f"rule matches nothing: {text!r}")
    equals_at = text.find("=", close_at + 1)
    if equals_at < 0:
        raise ValueError(f"rule has no '=': {text!r}")
    return Rule(
        prefix=text[:open_at],
        match=text[open_at + 1:close_at],
        suffix=text[close_at + 1:equals_at],
        output=text[equals_at + 1:],
    )


_SYMBOL_RULES = (
    "(A)=",
    "(!)=.",
    '(") =-AH5NKWOWT-',
    '(")=KWOW4T-',
    "(#)= NAH4MBER",
    "($)= DAA4LER",
    "(%)= PERSEH4NT",
    "(&)= AEND",
    "(')=",
    "(*)= AE4STERIHSK",
    "(+)= PLAH4S",
    "(,)=,",
    " (-) =-",
    "(-)=",
    "(.)= POYNT",
    "(/)= SLAE4SH",
    "(0)= ZIY4ROW",
    " (1ST)=FER4ST",
    " (10TH)=TEH4NTH",
    "(1)= WAH4N",
    " (2ND)=SEH4KUND",
    "(2)= TUW4",
    " (3RD)=THER4D",
    "(3)= THRIY4",
    "(4)= FOH4R",
    " (5TH)=FIH4FTH",
    "(5)= FAY4V",
    " (64) =SIH4KSTIY FOHR",
    "(6)= SIH4KS",
    "(7)= SEH4VUN",
    " (8TH)=EY4TH",
    "(8)= EY4T",
    "(9)= NAY4N",
    "(:)=.",
    "(;)=.",
    "(<)= LEH4S DHAEN",
    "(=)= IY4KWULZ",
    "(>)= GREY4TER DHAEN",
    "(?)=?",
    "(@)= AE6T",
    "(^)= KAE4RIXT",
)

_PARSED_SYMBOL_RULES = tuple(parse_rule(text) for text in _SYMBOL_RULES)


def punctuation_rules() -> tuple[Rule, ...]:
    """The rules for digits and symbols, in the order they are tried."""
    return _PARSED_SYMBOL_RULES