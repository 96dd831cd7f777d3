"""
Tokenizer behavioral tests (bare tokens, quoting, greedy capture, failures).

Scope
- Validate type sniffing priority and whole-token matching.
- Validate quoted strings: escapes, case folding, adjacency, unterminated quotes.
- Validate greedy capture and the argument limit.
- Validate scratch buffer reuse across tokens.

Conventions
- Test method names follow CamelCase per project convention.
- Specs are compiled with herald.specs.compile(), as listeners do.
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase

from herald.buffers import ScratchBuffer
from herald.faults import FaultCode
from herald.parser import Argument, ParseFault, parse
from herald.specs import MAXARGS, ArgFlag, compile


def tokenize(text, spec="", limit=MAXARGS):
    return parse(text, compile(spec), limit)


class TestBareTokens(TestCase):
    """Behavioral tests for unquoted tokens."""

    def testInteger(self):
        self.assertEqual(tokenize("42", "i"), [Argument(ArgFlag.INTEGER, 42)])

    def testSignedInteger(self):
        self.assertEqual(tokenize("-7 +3", "i|i"), [Argument(ArgFlag.INTEGER, -7), Argument(ArgFlag.INTEGER, 3)])

    def testNoPartialInteger(self):
        self.assertEqual(tokenize("42x", "i"), [Argument(ArgFlag.STRING, "42x")])

    def testUnderscoreSeparatorsAreNotNumbers(self):
        self.assertEqual(tokenize("1_000", "i"), [Argument(ArgFlag.STRING, "1_000")])

    def testIntegerBeforeFloat(self):
        self.assertEqual(tokenize("3", "i,f"), [Argument(ArgFlag.INTEGER, 3)])

    def testFloatWhenIntegerDoesNotMatch(self):
        self.assertEqual(tokenize("3.5", "i,f"), [Argument(ArgFlag.FLOAT, 3.5)])

    def testFloatForms(self):
        arguments = tokenize("1e3 .5 -inf", "f|f|f")
        self.assertEqual([argument.tag for argument in arguments], [ArgFlag.FLOAT] * 3)
        self.assertEqual(arguments[0].value, 1000.0)
        self.assertEqual(arguments[1].value, 0.5)
        self.assertTrue(math.isinf(arguments[2].value))

    def testIntegerOnFloatSlotIsFloat(self):
        self.assertEqual(tokenize("2", "f"), [Argument(ArgFlag.FLOAT, 2.0)])

    def testDisabledTypesAreNotTried(self):
        self.assertEqual(tokenize("42", "s"), [Argument(ArgFlag.STRING, "42")])

    def testBoolean(self):
        self.assertEqual(tokenize("TRUE", "b"), [Argument(ArgFlag.BOOLEAN, True)])

    def testBooleanWords(self):
        self.assertEqual(
            tokenize("on Off false", "b|b|b"),
            [Argument(ArgFlag.BOOLEAN, True), Argument(ArgFlag.BOOLEAN, False), Argument(ArgFlag.BOOLEAN, False)],
        )

    def testNoPartialBoolean(self):
        self.assertEqual(tokenize("tru", "b"), [Argument(ArgFlag.STRING, "tru")])

    def testAnySlotYieldsString(self):
        self.assertEqual(tokenize("12 true", ""), [Argument(ArgFlag.STRING, "12"), Argument(ArgFlag.STRING, "true")])

    def testCaseFolding(self):
        self.assertEqual(
            tokenize("MiXeD MiXeD", "l|u"),
            [Argument(ArgFlag.STRING, "mixed"), Argument(ArgFlag.STRING, "MIXED")],
        )

    def testWhitespaceRuns(self):
        self.assertEqual(
            tokenize("  a \t b  ", "s|s"),
            [Argument(ArgFlag.STRING, "a"), Argument(ArgFlag.STRING, "b")],
        )

    def testEmptyText(self):
        self.assertEqual(tokenize("   ", "i"), [])


class TestQuotedTokens(TestCase):
    """Behavioral tests for quoted strings."""

    def testQuotedThenBare(self):
        self.assertEqual(
            tokenize('"a b" c', "s|s"),
            [Argument(ArgFlag.STRING, "a b"), Argument(ArgFlag.STRING, "c")],
        )

    def testSingleQuotes(self):
        self.assertEqual(tokenize("'x y'", "s"), [Argument(ArgFlag.STRING, "x y")])

    def testOtherQuoteIsLiteral(self):
        self.assertEqual(tokenize("\"it's\"", "s"), [Argument(ArgFlag.STRING, "it's")])

    def testEscapedQuote(self):
        self.assertEqual(tokenize(r'"say \"hi\""', "s"), [Argument(ArgFlag.STRING, 'say "hi"')])

    def testQuotingAlwaysYieldsString(self):
        self.assertEqual(tokenize('"42"', "i"), [Argument(ArgFlag.STRING, "42")])

    def testQuotedCaseFolding(self):
        self.assertEqual(tokenize('"Hello World"', "u"), [Argument(ArgFlag.STRING, "HELLO WORLD")])

    def testEmptyQuotes(self):
        self.assertEqual(tokenize('""', "s"), [Argument(ArgFlag.STRING, "")])

    def testNextSlotStartsRightAfterClosingQuote(self):
        self.assertEqual(
            tokenize("'it''s'", "s|s"),
            [Argument(ArgFlag.STRING, "it"), Argument(ArgFlag.STRING, "s")],
        )

    def testBareTokenRightAfterClosingQuote(self):
        self.assertEqual(
            tokenize('"ab"cd', "s|s"),
            [Argument(ArgFlag.STRING, "ab"), Argument(ArgFlag.STRING, "cd")],
        )

    def testUnterminatedQuote(self):
        with self.assertRaises(ParseFault) as context:
            tokenize('ok "abc', "s|s")
        self.assertEqual(context.exception.code, FaultCode.SYNTAX_ERROR)
        self.assertEqual(context.exception.index, 1)

    def testBufferOverflow(self):
        class FixedBuffer(ScratchBuffer):
            def adjust(self, capacity, /):
                pass

        with self.assertRaises(ParseFault) as context:
            parse('7 "abcdef"', compile("i|s"), MAXARGS, FixedBuffer(2))
        self.assertEqual(context.exception.code, FaultCode.BUFFER_OVERFLOW)
        self.assertEqual(context.exception.index, 1)

    def testEscapedClosingQuoteDoesNotClose(self):
        with self.assertRaises(ParseFault):
            tokenize(r'"abc\"', "s")

    def testSharedBufferDoesNotLeak(self):
        buffer = ScratchBuffer(2)
        self.assertEqual(
            parse('"a long one" "x"', compile("s|s"), MAXARGS, buffer),
            [Argument(ArgFlag.STRING, "a long one"), Argument(ArgFlag.STRING, "x")],
        )
        self.assertGreaterEqual(buffer.capacity, len('"a long one" "x"'))


class TestGreedyAndLimit(TestCase):
    """Behavioral tests for greedy slots and the argument limit."""

    def testGreedyTakesTrimmedRemainder(self):
        self.assertEqual(tokenize("  hello world  ", "g"), [Argument(ArgFlag.STRING, "hello world")])

    def testGreedyKeepsInteriorWhitespace(self):
        self.assertEqual(
            tokenize("7 spamming   the chat", "i|g"),
            [Argument(ArgFlag.INTEGER, 7), Argument(ArgFlag.STRING, "spamming   the chat")],
        )

    def testGreedyKeepsQuotesVerbatim(self):
        self.assertEqual(tokenize('"not parsed" as quotes', "g"), [Argument(ArgFlag.STRING, '"not parsed" as quotes')])

    def testGreedyEndsParsing(self):
        self.assertEqual(
            tokenize("a b c d", "s|g|s"),
            [Argument(ArgFlag.STRING, "a"), Argument(ArgFlag.STRING, "b c d")],
        )

    def testLimit(self):
        self.assertEqual(len(tokenize("1 2 3 4", "", limit=2)), 2)

    def testSlotsPastSpecAreAny(self):
        self.assertEqual(tokenize("1 two", "i"), [Argument(ArgFlag.INTEGER, 1), Argument(ArgFlag.STRING, "two")])

    def testDeterministic(self):
        flags = compile("i|s|g")
        text = '7 "a b" rest of it'
        self.assertEqual(parse(text, flags, MAXARGS), parse(text, flags, MAXARGS))


if __name__ == "__main__":
    unittest.main()
