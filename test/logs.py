"""
Tests for the logging setup.

This module verifies that the library is silent by default and that install()
attaches exactly one rich handler, replacing any previous one.
"""
import logging
import unittest
from unittest import TestCase

from rich.logging import RichHandler

from herald.logs import install, logger


class LogsTest(TestCase):
    """
    Test suite for `herald.logs`.
    """

    def setUp(self) -> None:
        self.handlers = list(logger.handlers)
        self.level = logger.level

    def tearDown(self) -> None:
        logger.handlers[:] = self.handlers
        logger.setLevel(self.level)

    def testSilentByDefault(self) -> None:
        self.assertTrue(any(isinstance(handler, logging.NullHandler) for handler in logger.handlers))

    def testInstall(self) -> None:
        handler = install("DEBUG")
        self.assertIsInstance(handler, RichHandler)
        self.assertIn(handler, logger.handlers)
        self.assertEqual(logger.level, logging.DEBUG)

    def testInstallReplacesPreviousHandler(self) -> None:
        first = install()
        second = install(colorful=False)
        self.assertNotIn(first, logger.handlers)
        self.assertEqual(sum(isinstance(handler, RichHandler) for handler in logger.handlers), 1)
        self.assertIs(logger.handlers[-1], second)


if __name__ == "__main__":
    unittest.main()
