"""Interpreter for a fully-parenthesized integer expression language with recursive functions.

Basic program flow:
    1. Tokenizer: produces positioned tokens from source text (see exprlang/pure/tokens.py)
    2. Parser: recursive descent over the tokens, producing a function table and one syntax tree for the top-level
       expression (see exprlang/pure/grammar.py for the parser and exprlang/pure/lexical.py for the grammar)
    3. Evaluator: walks the syntax tree and computes an integer (see exprlang/pure/evaluator.py)

Everything around these three steps (error reporting, sessions, the shell) lives in exprlang/lang.
"""

from exprlang.lang.session import interpret, run

__all__ = ["interpret", "run"]
