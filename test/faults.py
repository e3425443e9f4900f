"""
Faults module tests (codes, replacement, triggering and rich rendering).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
import warnings
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from cliopts import faults
from cliopts.faults import (
    ContractViolation,
    FaultCode,
    MissingParameterError,
    OptionWarning,
    ParseError,
    ShadowedNameWarning,
    UnrecognizedOptionError,
    getdoc,
    trigger,
)


def unrecognized():
    return UnrecognizedOptionError(
        "unrecognized option '--prot'",
        title="unrecognized option",
        code=FaultCode.UNRECOGNIZED_OPTION,
        hint="check the spelling of '--prot'",
        input="--prot",
    )


class TestFaultCode(TestCase):

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.MISSING_PARAMETER.normalize(), "11117")

    def testNormalizeHonoursHostCodes(self):
        main = __import__("__main__")
        with patch.object(main, "__codes__", {FaultCode.MISSING_PARAMETER: "E-PARAM"}, create=True):
            self.assertEqual(FaultCode.MISSING_PARAMETER.normalize(), "E-PARAM")

    def testGetdoc(self):
        main = __import__("__main__")
        self.assertIsNone(getdoc(FaultCode.UNEXPECTED_VALUE))
        with patch.object(main, "__docs__", {FaultCode.UNEXPECTED_VALUE: "bare value"}, create=True):
            self.assertEqual(getdoc(FaultCode.UNEXPECTED_VALUE), "bare value")

    def testGetdocRejectsOtherTypes(self):
        with self.assertRaises(TypeError):
            getdoc(11117)


class TestParseError(TestCase):

    def testMessageAndOptions(self):
        error = unrecognized()
        self.assertEqual(str(error), "unrecognized option '--prot'")
        self.assertEqual(error.message, "unrecognized option '--prot'")
        self.assertEqual(error.options["input"], "--prot")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            unrecognized().options["input"] = "--port"

    def testReplaceKeepsTypeAndMergesOptions(self):
        error = unrecognized().__replace__(hint="other")
        self.assertIsInstance(error, UnrecognizedOptionError)
        self.assertEqual(error.options["hint"], "other")
        self.assertEqual(error.options["input"], "--prot")

    def testHierarchy(self):
        self.assertTrue(issubclass(MissingParameterError, ParseError))
        self.assertTrue(issubclass(ParseError, Exception))
        self.assertFalse(issubclass(ContractViolation, Exception))

    def testTriggerRaisesOutsideShell(self):
        with self.assertRaises(UnrecognizedOptionError):
            trigger(unrecognized())

    def testTriggerExitsInShell(self):
        console = Console(color_system=None, force_terminal=False, width=120)
        with patch.object(faults, "console", console):
            with console.capture() as capture:
                with self.assertRaises(SystemExit) as context:
                    trigger(unrecognized(), shell=True, colorful=False)
        self.assertEqual(context.exception.code, 2)
        output = capture.get()
        self.assertIn("11112", output)
        self.assertIn("Unrecognized Option", output)
        self.assertIn("unrecognized option '--prot'", output)
        self.assertIn("check the spelling of '--prot'", output)

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testFancyRenderUsesPanel(self):
        file = io.StringIO()
        console = Console(file=file, color_system=None, force_terminal=False, width=120)
        console.print(unrecognized().__replace__(fancy=True, colorful=False))
        self.assertIn("╭", file.getvalue())
        self.assertIn("Unrecognized Option", file.getvalue())


class TestOptionWarning(TestCase):

    def testTriggerWarnsOutsideShell(self):
        with self.assertWarns(ShadowedNameWarning):
            trigger(ShadowedNameWarning("shadowed", title="shadowed option name", code=FaultCode.SHADOWED_NAME))

    def testTriggerPrintsInShell(self):
        console = Console(color_system=None, force_terminal=False, width=120)
        with patch.object(faults, "console", console):
            with console.capture() as capture:
                with warnings.catch_warnings():
                    warnings.simplefilter("error")
                    trigger(OptionWarning("shadowed", code=FaultCode.SHADOWED_NAME), shell=True, colorful=False)
        self.assertIn("shadowed", capture.get())


if __name__ == "__main__":
    unittest.main()
