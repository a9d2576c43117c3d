"""
Tokenizer
Splits raw search-bar input into tokens
"""

import re
from dataclasses import dataclass

# One or more whitespace or comma characters
TOKEN_SEPARATOR = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class Token:
    """Smallest unit of user input, never empty"""
    text: str


def tokenize(text: str) -> list[Token]:
    """Split input on whitespace and commas, left to right, dropping empty fragments"""
    return [Token(fragment) for fragment in TOKEN_SEPARATOR.split(text) if fragment]
