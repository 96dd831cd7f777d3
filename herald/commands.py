"""
Herald default registry and module-level shortcuts.

Most hosts need exactly one command table. This module owns it (`registry`) and
exposes its operations as plain functions, plus a decorator to declare a command
and its executer in one place.

Quick start
    from herald import command, run

    @command("kick", "i|g", ("id", "reason"), 1, 2, protected=True, authority=2)
    def kick(session, args):
        session.disconnect(args[0], args[1] if len(args) > 1 else "")
        return 1

    run(player, "kick 7 spamming the chat")

Executers receive (session, arguments): the resolved invoker and the parsed values,
a list by default or a tag-keyed dict for associative commands. Returning a falsy
value (or None) aborts the command.
"""
from .registry import Registry
from .utils import *

registry = Registry()


def command(name, spec="", /, *args, **options):
    """
    Declare a command on the default registry; returns a decorator binding its executer.

    Parameters
    - name, spec, *args: as Registry.create() (optional tags and/or min/max pair).
    - **options: Listener options (help, authority, protected, associative, ...).

    Returns
    - Callable[[Callable], Callable]: the decorator; the decorated function is
      returned unchanged and the listener is reachable via find(name).
    """
    listener = registry.create(name, spec, *args, **options)

    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            registry.detach(listener)
            raise TypeError("@command() must be applied to a callable")
        return listener.bind_exec(callback)

    return wrapper


def create(name, spec="", /, *args, **options):
    return registry.create(name, spec, *args, **options)


def attach(name, listener, /):
    return registry.attach(name, listener)


def detach(object, /):
    registry.detach(object)


def find(name, /):
    return registry.find(name)


def sort():
    registry.sort()


def count():
    return registry.count


def context():
    """
    The context of the command currently running, or None outside of one.
    """
    return registry.context


def run(invoker, text, /):
    """
    Run command text on the default registry; see Registry.run().
    """
    return registry.run(invoker, text)


__all__ = (
    "registry",
    "command",
    "create",
    "attach",
    "detach",
    "find",
    "sort",
    "count",
    "context",
    "run",
)
