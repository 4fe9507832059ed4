"""Lexical scanner for the expression language. Turns raw source text into a flat list of positioned tokens.

Scanning never fails: characters that do not belong to the language (including whitespace) are silently skipped.
Numbers and identifiers are accumulated character by character and only emitted once a character that cannot extend
them is seen, so they are positioned at the character that terminated them, not at their first character.
"""

import string
from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Every kind of token the scanner can produce."""
    NUMBER = "number"
    IDENTIFIER = "identifier"
    OPERATION = "operation"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    OPEN_SQUARE = "["
    CLOSE_SQUARE = "]"
    OPEN_CURLY = "{"
    CLOSE_CURLY = "}"
    QUESTION_MARK = "?"
    COLON = ":"
    EQUALS = "="
    COMMA = ","
    EOL = "\n"

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Token:
    """A single token. value is the int for NUMBER, the name for IDENTIFIER and the operator char for OPERATION."""
    type: TokenType
    row: int
    column: int
    value: object = None

    def __str__(self):
        if self.value is None:
            return str(self.type)
        return f"{self.type}({self.value})"


OPERATIONS = "+-*/%<>"
DIGITS = string.digits
IDENTIFIER_CHARS = string.ascii_letters + "_"

PUNCTUATION = {token_type.value: token_type for token_type in TokenType if len(token_type.value) == 1}


def number_value(digits):
    """Returns the int spelled by digits. Not subject to the host's int/str conversion digit limit."""
    value = 0
    for digit in digits:
        value = value * 10 + DIGITS.index(digit)
    return value


def tokenize(source):
    """Returns list of Tokens in source. Rows and columns are 1-based; a line feed ends the current row."""
    tokens = []
    number = []      # pending digits
    identifier = []  # pending letters/underscores

    row, column = 1, 1

    def flush(char=None):
        """Routes char to the matching accumulator and emits whichever accumulator char cannot extend."""
        if char is not None and char in DIGITS:
            number.append(char)
        elif number:
            tokens.append(Token(TokenType.NUMBER, row, column, number_value(number)))
            number.clear()

        if char is not None and char in IDENTIFIER_CHARS:
            identifier.append(char)
        elif identifier:
            tokens.append(Token(TokenType.IDENTIFIER, row, column, "".join(identifier)))
            identifier.clear()

    for char in source:
        flush(char)

        if char in OPERATIONS:
            tokens.append(Token(TokenType.OPERATION, row, column, char))
        elif char in PUNCTUATION:
            tokens.append(Token(PUNCTUATION[char], row, column))

        if char == "\n":
            row += 1
            column = 1
        else:
            column += 1

    flush()
    return tokens
