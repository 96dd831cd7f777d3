r"""
Herald tokenizer: turn argument text into typed arguments, slot by slot.

Processing is strictly left-to-right, one slot at a time, and stops when the
text is exhausted or `limit` arguments were produced. For every slot:

1. leading whitespace is skipped;
2. a GREEDY slot takes the rest of the text as one string and ends parsing;
3. a quote (' or ") starts a quoted string that runs to the same, unescaped
   quote; \' or \" inside it is a literal quote (the backslash is dropped).
   Quoted values are always strings;
4. anything else is a bare token up to the next whitespace, interpreted as
   integer, float, boolean, then string, trying only the types enabled on the
   slot and only accepting an interpretation that consumes the whole token
   ("42x" is never an integer). Booleans are "true"/"on" and "false"/"off",
   case-insensitive.

A slot ends where its token ends: the next slot may start right after a closing
quote, so `"ab"cd` yields two arguments.

Strings honour the slot's LOWER/UPPER case folding.

Example
    >>> from herald.specs import compile
    >>> parse('7 "a b" rest of it', compile("i|s|g"), 16)
    [Argument(tag=<ArgFlag.INTEGER: 1>, value=7), Argument(tag=<ArgFlag.STRING: 8>, value='a b'),
     Argument(tag=<ArgFlag.STRING: 8>, value='rest of it')]
"""
import re
from typing import NamedTuple

from .buffers import ScratchBuffer
from .faults import FaultCode
from .specs import ArgFlag

_QUOTES = ("'", '"')
_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)", re.IGNORECASE)
_BOOLEANS = {"true": True, "on": True, "false": False, "off": False}


class Argument(NamedTuple):
    """
    One parsed argument: its type-tag and its decoded value.
    """
    tag: ArgFlag
    value: object


class ParseFault(Exception):
    """
    Structured parse failure, attributable to the slot at `index`.
    """

    def __init__(self, code, index, message):
        super().__init__(message)
        self.code = code
        self.index = index
        self.message = message


def _fold(value, flag):
    if flag & ArgFlag.LOWER:
        return value.lower()
    if flag & ArgFlag.UPPER:
        return value.upper()
    return value


def _interpret(token, flag):
    """
    Sniff a bare token against the types enabled on its slot.
    """
    if flag & ArgFlag.INTEGER and _INTEGER.fullmatch(token):
        return Argument(ArgFlag.INTEGER, int(token))
    if flag & ArgFlag.FLOAT and _FLOAT.fullmatch(token):
        return Argument(ArgFlag.FLOAT, float(token))
    if flag & ArgFlag.BOOLEAN and len(token) <= 5:
        try:
            return Argument(ArgFlag.BOOLEAN, _BOOLEANS[token.lower()])
        except KeyError:
            pass
    return Argument(ArgFlag.STRING, _fold(token, flag))


def _quoted(text, position, flag, index, buffer):
    """
    Extract the quoted string opening at `position`; return (argument, next position).
    """
    close = text[position]
    position += 1
    previous = close
    buffer.rewind()

    while True:
        if position >= len(text):
            raise ParseFault(FaultCode.SYNTAX_ERROR, index, "string argument not closed properly")
        char = text[position]
        if char == close:
            if previous != "\\":
                break
            # escaped quote: the backslash is replaced by the quote itself
            buffer.unwrite()
        try:
            buffer.write(char)
        except OverflowError:
            raise ParseFault(FaultCode.BUFFER_OVERFLOW, index, "command buffer was exceeded unexpectedly") from None
        previous = char
        position += 1

    return Argument(ArgFlag.STRING, _fold(buffer.getvalue(), flag)), position + 1


def parse(text, flags, limit, /, buffer=None):
    """
    Tokenize `text` against compiled slot `flags`, producing at most `limit` arguments.

    Parameters
    - text: the argument text (everything after the command name).
    - flags: per-slot ArgFlag sets, as returned by herald.specs.compile().
    - limit: maximum number of arguments to produce.
    - buffer: scratch buffer to stage quoted strings; a private one is created
      when omitted. It is grown to the text length before use.

    Raises
    - ParseFault: SYNTAX_ERROR for an unterminated quote, BUFFER_OVERFLOW when
      the scratch buffer cannot hold a quoted token.
    """
    if buffer is None:
        buffer = ScratchBuffer(len(text))
    buffer.adjust(len(text))

    arguments = []
    position = 0
    length = len(text)

    while len(arguments) < limit:
        while position < length and text[position].isspace():
            position += 1
        if position >= length:
            break

        index = len(arguments)
        flag = flags[index] if index < len(flags) else ArgFlag.ANY

        if flag & ArgFlag.GREEDY:
            arguments.append(Argument(ArgFlag.STRING, text[position:].rstrip()))
            break

        if text[position] in _QUOTES:
            argument, position = _quoted(text, position, flag, index, buffer)
            arguments.append(argument)
            continue

        end = position
        while end < length and not text[end].isspace():
            end += 1
        arguments.append(_interpret(text[position:end], flag))
        position = end

    return arguments


__all__ = (
    "Argument",
    "ParseFault",
    "parse",
)
