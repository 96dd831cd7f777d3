"""
Herald dispatcher: run one line of command text against a registry.

Flow
1. the text is trimmed and split into the command name and the argument text;
2. a Context is created and made current for the duration of the call (guard);
3. the listener is looked up, the invoker resolved and authorized;
4. the argument text is tokenized against the listener's slots and checked
   for arity and types;
5. the executer runs and its result is relayed: success to on_post, an abort
   or an exception to on_fail.

Every failure becomes a fault reported through herald.faults.trigger() to the
registry's global on_fail sink, and the call returns a tagged Outcome instead of
raising. int(outcome) is what hosts see: the executer's result on success, 0 on
abort, -1 on failure.

Re-entrancy
- An executer may run other commands (nested dispatch). Each call owns its
  Context and scratch buffer; the guard restores the enclosing context on exit,
  but only while its own context is still the current one.
"""
import contextlib
import contextvars
import logging
from typing import NamedTuple

from .buffers import ScratchBuffer
from .faults import CommandException, CommandWarning, FaultCode, fault, trigger
from .listeners import validate_name
from .parser import ParseFault, parse
from .utils import *

logger = logging.getLogger(__name__)

_current = contextvars.ContextVar("herald.context", default=None)


class Context:
    """
    Per-invocation state: who ran what, with which arguments.

    Contexts are created by the dispatcher, one per call, and are only
    meaningful while that call runs (see current()).
    """

    def __init__(self, registry, invoker, /):
        self._registry = registry
        self._invoker = invoker
        self._session = None
        self._command = ""
        self._argument = ""
        self._listener = None
        self._arguments = []
        self._buffer = ScratchBuffer()

    command = mirror("command")
    argument = mirror("argument")
    arguments = mirror("arguments")

    @property
    def registry(self):
        return self._registry

    @property
    def invoker(self):
        return self._invoker

    @property
    def session(self):
        """
        The resolved invoker, once the command was found; None before that.
        """
        return self._session

    @property
    def listener(self):
        return self._listener

    @property
    def buffer(self):
        return self._buffer

    def release(self):
        """
        Drop parsed arguments and wipe the scratch buffer.
        """
        self._arguments.clear()
        self._buffer.clear()

    def __repr__(self):
        return f"context(invoker={self._invoker!r}, command={self._command!r}, argument={self._argument!r})"


def current():
    """
    Return the context of the innermost running dispatch, or None.
    """
    return _current.get()


@contextlib.contextmanager
def guard(context, /):
    """
    Make `context` current for the duration of the block.
    """
    previous = _current.get()
    _current.set(context)
    try:
        yield context
    finally:
        if _current.get() is context:
            _current.set(previous)


def _integral(value):
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 1


class Succeeded(NamedTuple):
    """
    The executer returned a truthy result.
    """
    value: object

    @property
    def message(self):
        return ""

    def __int__(self):
        return _integral(self.value)


class Aborted(NamedTuple):
    """
    The executer returned a falsy result (or None).
    """
    value: object
    fault: CommandWarning

    @property
    def message(self):
        return self.fault.message

    def __int__(self):
        return 0


class Failed(NamedTuple):
    """
    The command did not run, or its executer raised.
    """
    fault: CommandException

    @property
    def code(self):
        return self.fault.code

    @property
    def message(self):
        return self.fault.message

    def __int__(self):
        return -1


type Outcome = Succeeded | Aborted | Failed


def _reporter(registry, invoker):
    def report(code, message, /, **options):
        return trigger(
            fault(code, message),
            sink=registry.on_fail,
            shell=registry.shell,
            fancy=registry.fancy,
            colorful=registry.colorful,
            invoker=invoker,
            **options,
        )
    return report


def _describe(exception):
    return str(exception) or type(exception).__name__


def _collect(listener, arguments):
    """
    Shape parsed arguments for the executer: a mapping keyed by tag (or slot
    index when untagged) for associative listeners, a list otherwise.
    """
    if not listener.associative:
        return [argument.value for argument in arguments]
    return {
        listener.get_tag(index) or index: argument.value
        for index, argument in enumerate(arguments)
    }


def _relay_failure(listener, session, outcome, report):
    if listener.on_fail is None:
        return
    try:
        listener.on_fail(session, outcome)
    except Exception as exception:
        logger.debug("failure handler of %r raised", listener.name, exc_info=True)
        report(FaultCode.UNRESOLVED_FAILURE, "unable to resolve command failure", value=_describe(exception))


def _execute(context, report):
    registry = context.registry

    listener = registry.find(context.command)
    if listener is None:
        return Failed(report(FaultCode.UNKNOWN_COMMAND, "unable to find the specified command", value=context.command))
    context._listener = listener

    session = context._session = registry.resolve(context.invoker)

    if not listener.authcheck(session):
        return Failed(report(FaultCode.INSUFFICIENT_AUTH, "insufficient authority to execute command", value=listener.authority))

    if listener.on_exec is None:
        return Failed(report(FaultCode.MISSING_EXECUTER, "command has no executer bound", value=listener.name))

    if context.argument:
        try:
            # one extra slot: surplus input is reported as extraneous
            context._arguments = parse(context.argument, listener.flags, listener.maxargs + 1, context.buffer)
        except ParseFault as failure:
            return Failed(report(failure.code, failure.message, index=failure.index, value=failure.index))

    count = len(context._arguments)
    if count < listener.minargs:
        return Failed(report(
            FaultCode.INCOMPLETE_ARGS,
            f"insufficient arguments: expected at least {listener.minargs}, got {count}",
            value=listener.minargs,
        ))
    if count > listener.maxargs:
        return Failed(report(
            FaultCode.EXTRANEOUS_ARGS,
            f"extraneous arguments: expected at most {listener.maxargs}, got {count}",
            value=listener.maxargs,
        ))

    for index, argument in enumerate(context._arguments):
        if not listener.argcheck(index, argument.tag):
            return Failed(report(
                FaultCode.UNSUPPORTED_ARG,
                f"unsupported {ordinal(index + 1)} argument: {listener.info}",
                index=index,
                value=index,
            ))

    arguments = _collect(listener, context._arguments)
    logger.debug("executing %r with %r", listener.name, arguments)

    try:
        result = listener.on_exec(session, arguments)
    except Exception as exception:
        logger.debug("executer of %r raised", listener.name, exc_info=True)
        message = _describe(exception)
        failed = Failed(report(FaultCode.EXECUTION_FAILED, message, value=message, exception=exception))
        _relay_failure(listener, session, failed, report)
        return failed

    if not result:
        aborted = Aborted(result, report(FaultCode.EXECUTION_ABORTED, "command execution aborted", value=result))
        _relay_failure(listener, session, aborted, report)
        return aborted

    if listener.on_post is not None:
        try:
            listener.on_post(session, result)
        except Exception as exception:
            logger.debug("post handler of %r raised", listener.name, exc_info=True)
            report(
                FaultCode.POST_PROCESSING_FAILED,
                "unable to complete command post processing",
                value=_describe(exception),
            )

    return Succeeded(result)


def dispatch(registry, invoker, text, /):
    """
    Run one line of command text for `invoker`; never raises.

    Returns a Succeeded, Aborted or Failed outcome.
    """
    report = _reporter(registry, invoker)

    if not isinstance(text, str) or not text.strip():
        return Failed(report(FaultCode.EMPTY_COMMAND, "invalid or empty command name", value=text))

    name, *rest = text.split(None, 1)
    try:
        validate_name(name)
    except (TypeError, ValueError) as exception:
        return Failed(report(FaultCode.INVALID_COMMAND, str(exception), value=name))

    context = Context(registry, invoker)
    context._command = name
    context._argument = rest[0].strip() if rest else ""

    try:
        with guard(context):
            return _execute(context, report)
    except Exception as exception:
        logger.exception("unexpected failure while running %r", name)
        return Failed(report(FaultCode.EXECUTION_FAILED, "exceptions occurred during execution", value=_describe(exception)))
    finally:
        context.release()


__all__ = (
    "Context",
    "Succeeded",
    "Aborted",
    "Failed",
    "Outcome",
    "current",
    "guard",
    "dispatch",
)
