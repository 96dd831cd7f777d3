"""
Herald faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every outcome the dispatcher
  can report. Codes are grouped by domain to keep logs/searches predictable.
- CommandException / CommandWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased way.
- trigger(): central entry point (the error sink) to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Sink contract
- A fault is always logged on the "herald.faults" logger.
- When the options carry a callable "sink" (the registry's global on-fail callback),
  the fault is handed to it; anything the sink raises is logged and swallowed.
- Otherwise, in shell mode, the fault is rendered on stderr through rich.
- Delivering a fault never raises: sink failures are logged, so dispatching never throws.

Integration
- The dispatcher builds a fault per failure and calls trigger(fault, **ctx) with the
  registry flags (shell/fancy/colorful) and the sink.
- Hosts may remap codes (__codes__), restyle output (__styles__), attach docs
  (__docs__) and rename the program (__prog__) from their __main__ module.
"""
import copy
import logging
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)
logger = logging.getLogger(__name__)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the dispatcher (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • EMPTY_COMMAND, INVALID_COMMAND, UNKNOWN_COMMAND
    - parsing (1111x)
      • SYNTAX_ERROR, BUFFER_OVERFLOW
    - validation (1112x)
      • MISSING_EXECUTER, INSUFFICIENT_AUTH, INCOMPLETE_ARGS, EXTRANEOUS_ARGS, UNSUPPORTED_ARG
    - execution (1113x)
      • EXECUTION_FAILED, UNRESOLVED_FAILURE
    - warnings (1213x)
      • EXECUTION_ABORTED, POST_PROCESSING_FAILED
    """
    UNKNOWN                     = 11100

    # --- routing errors (11xxx) ---
    EMPTY_COMMAND               = 11101
    INVALID_COMMAND             = 11102
    UNKNOWN_COMMAND             = 11103

    # --- parsing errors (11xxx) ---
    SYNTAX_ERROR                = 11111
    BUFFER_OVERFLOW             = 11112

    # --- validation errors (11xxx) ---
    MISSING_EXECUTER            = 11121
    INSUFFICIENT_AUTH           = 11122
    INCOMPLETE_ARGS             = 11123
    EXTRANEOUS_ARGS             = 11124
    UNSUPPORTED_ARG             = 11125

    # --- execution errors (11xxx) ---
    EXECUTION_FAILED            = 11131
    UNRESOLVED_FAILURE          = 11132

    # --- warnings (12xxx) ---
    EXECUTION_ABORTED           = 12131
    POST_PROCESSING_FAILED      = 12132

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_DEFAULT_STYLES = {
    # header parts
    "prog-name": "bold #E6E6F0",
    "error-code": "bold #00E5FF",
    "error-title": "bold #FF4DA6",
    "warning-code": "bold #FFB400",
    "warning-title": "bold #FFC2E0",

    # body
    "message": "#C8C8D0",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}


class _Fault:
    """
    Shared message/options carrier for exceptions and warnings.
    """
    __severity__ = "error"
    __level__ = logging.WARNING

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", FaultCode.UNKNOWN)

    @property
    def value(self):
        """
        contextual value attached by the reporter (invoker, index, result, ...).
        """
        return self.options.get("value")

    def __str__(self):
        return str(self.message) if self.message else ""

    def __rich__(self):
        main = __import__("__main__")
        styles = defaultdict(str, _DEFAULT_STYLES | getattr(main, "__styles__", {}))
        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "herald"), "prog-name"),
            " — ",
            text(self.code.normalize(), "%s-code" % self.__severity__),
            " | ",
            text(self.options.get("title", "").title(), "%s-title" % self.__severity__),
            " ]"
        )
        message = text(self.message, "message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options.get("hint"), "hint"))

        if self.options.get("fancy", False):
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        logger.log(self.__level__, "[%s] %s", self.code.name.lower(), self.message)
        if callable(sink := self.options.get("sink")):
            try:
                sink(self)
            except Exception:
                logger.exception("error sink failed while reporting %s", self.code.name.lower())
            return
        if self.options.get("shell", False):
            console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class CommandException(_Fault, Exception):
    """
    Fatal dispatch outcome: the command did not (successfully) run.
    """


class EmptyCommandError(CommandException): ...
class InvalidCommandError(CommandException): ...
class UnknownCommandError(CommandException): ...
class SyntaxFaultError(CommandException): ...
class BufferOverflowError(CommandException): ...
class MissingExecuterError(CommandException): ...
class InsufficientAuthError(CommandException): ...
class IncompleteArgsError(CommandException): ...
class ExtraneousArgsError(CommandException): ...
class UnsupportedArgError(CommandException): ...
class ExecutionFailedError(CommandException): ...
class UnresolvedFailureError(CommandException): ...


class CommandWarning(_Fault, Warning):
    """
    Non-fatal dispatch outcome: reported, but the command result stands.
    """
    __severity__ = "warning"
    __level__ = logging.INFO


class ExecutionAbortedWarning(CommandWarning): ...
class PostProcessingFailedWarning(CommandWarning): ...


# code -> (fault type, title, hint)
_CATALOG = {
    FaultCode.EMPTY_COMMAND: (
        EmptyCommandError, "empty command", "type a command name before any arguments"),
    FaultCode.INVALID_COMMAND: (
        InvalidCommandError, "invalid command", "command names cannot be empty or contain spaces"),
    FaultCode.UNKNOWN_COMMAND: (
        UnknownCommandError, "unknown command", "check the spelling or list the available commands"),
    FaultCode.SYNTAX_ERROR: (
        SyntaxFaultError, "syntax error", "close every quoted argument with the same quote it started with"),
    FaultCode.BUFFER_OVERFLOW: (
        BufferOverflowError, "buffer overflow", "shorten the command text and try again"),
    FaultCode.MISSING_EXECUTER: (
        MissingExecuterError, "missing executer", "bind an executer to the command before running it"),
    FaultCode.INSUFFICIENT_AUTH: (
        InsufficientAuthError, "insufficient authority", "ask someone with enough authority to run it"),
    FaultCode.INCOMPLETE_ARGS: (
        IncompleteArgsError, "incomplete arguments", "add the missing arguments; see the command usage"),
    FaultCode.EXTRANEOUS_ARGS: (
        ExtraneousArgsError, "extraneous arguments", "remove the extra arguments; see the command usage"),
    FaultCode.UNSUPPORTED_ARG: (
        UnsupportedArgError, "unsupported argument", "pass a value of the type shown in the command usage"),
    FaultCode.EXECUTION_FAILED: (
        ExecutionFailedError, "execution failed", "check additional logs for more details"),
    FaultCode.UNRESOLVED_FAILURE: (
        UnresolvedFailureError, "unresolved failure", "check the failure handler bound to the command"),
    FaultCode.EXECUTION_ABORTED: (
        ExecutionAbortedWarning, "execution aborted", "the command chose not to complete"),
    FaultCode.POST_PROCESSING_FAILED: (
        PostProcessingFailedWarning, "post processing failed", "check the post handler bound to the command"),
}


def fault(code, message, /, **options):
    """
    build the catalogued fault for a code, with its default title and hint.

    explicit options win over the catalogue defaults.
    """
    try:
        type, title, hint = _CATALOG[code]
    except KeyError:
        raise ValueError(f"fault() unknown code {code!r}") from None
    return type(message, **{"code": code, "title": title, "hint": hint, "docs": getdoc(code)} | options)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options (the error sink).

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(...) before triggering.

    typical options
    - sink, shell, fancy, colorful, invoker, index, value.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault = copy.replace(fault, **options)
    fault.__trigger__()
    return fault


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandException",
    "EmptyCommandError",
    "InvalidCommandError",
    "UnknownCommandError",
    "SyntaxFaultError",
    "BufferOverflowError",
    "MissingExecuterError",
    "InsufficientAuthError",
    "IncompleteArgsError",
    "ExtraneousArgsError",
    "UnsupportedArgError",
    "ExecutionFailedError",
    "UnresolvedFailureError",
    "CommandWarning",
    "ExecutionAbortedWarning",
    "PostProcessingFailedWarning",
    "fault",
    "trigger",
    "getdoc",
)
