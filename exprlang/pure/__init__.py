"""Tokenizer, syntax tree, parser and evaluator of the expression language."""
