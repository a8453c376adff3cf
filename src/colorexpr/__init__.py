"""Lexer and parser for color-function expressions."""

from __future__ import annotations

from colorexpr.lexer import Tokenizer, tokenize
from colorexpr.parser import Parser, parse
from colorexpr.stream import CharacterStream

__version__ = "0.1.0"

__all__ = ["CharacterStream", "Parser", "Tokenizer", "parse", "tokenize"]
