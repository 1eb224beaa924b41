"""
Split an input line into whitespace-delimited tokens.

A token that opens with a quote runs to the matching closing quote, so
`echo "a b"` gives two tokens, `echo` and `a b`. The quotes are dropped and
the token is marked as quoted, which keeps `'|'` or `">"` from being read as
operators later on.
"""
from typing import NamedTuple

from seashell.errors import MalformedQuote

WHITESPACE = " \t"
QUOTES = "\"'"


class Token(NamedTuple):
    value: str
    quoted: bool = False


def tokenize(line):
    """Return the list of Tokens in `line`. An empty line gives no tokens."""
    line = line.strip(WHITESPACE)
    tokens = []
    i, n = 0, len(line)

    while i < n:
        if line[i] in WHITESPACE:
            i += 1
            continue

        start = i
        if line[i] in QUOTES:
            quote = line[i]
            close = line.find(quote, i + 1)
            if close == -1:
                raise MalformedQuote("unterminated quote", line[start:])
            value = line[i + 1:close]
            i = close + 1
            # text glued to the closing quote is literal, so "a"'b' gives a'b'
            while i < n and line[i] not in WHITESPACE:
                i += 1
            tokens.append(Token(value + line[close + 1:i], quoted=True))
            continue

        while i < n and line[i] not in WHITESPACE:
            i += 1
        tokens.append(Token(line[start:i]))

    return tokens
