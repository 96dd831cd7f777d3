"""
Herald command registry: the set of attached listeners and the global fallbacks.

Storage
- An insertion-ordered list of Entry(hash, name, listener) triples.
- Lookups are linear scans that compare the name hash first (fast path) and then
  the full name, so two different names sharing a hash are still two commands.
- sort() reorders entries by descending name; it only changes enumeration order
  (help listings), never what a lookup returns.

Global fallbacks
- on_auth: consulted by protected listeners without their own on_auth.
- on_fail: the error sink; receives every fault the dispatcher reports.

Sessions
- resolve(invoker) turns the host's invoker id into the session object handed to
  every callback. Without a resolver the id itself is used.
"""
import functools
import logging
import operator
from typing import NamedTuple

from .dispatch import current, dispatch
from .listeners import Listener, validate_name
from .specs import MAXARGS
from .utils import *

logger = logging.getLogger(__name__)


class Entry(NamedTuple):
    hash: int
    name: str
    listener: Listener


class Registry:
    """
    Owns attached listeners, keyed by name, and runs command text against them.

    Runtime flags
    - shell: render faults on stderr when no on_fail sink is bound.
    - fancy: render faults inside rich panels.
    - colorful: style rendered faults.
    """

    def __init__(self, *, resolver=Unset, hasher=hash, shell=False, fancy=False, colorful=True):
        if not callable(hasher):
            raise TypeError("registry 'hasher' must be callable")
        self._entries = []
        self.resolver = coalesce(resolver)
        self._hasher = hasher
        self._on_auth = None
        self._on_fail = None
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

    def __repr__(self):
        return f"registry(count={len(self._entries)!r}, names={[entry.name for entry in self._entries]!r})"

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter([entry.listener for entry in self._entries])

    def __contains__(self, object):
        return self.attached(object)

    @property
    def count(self):
        return len(self._entries)

    @property
    def entries(self):
        return tuple(self._entries)

    # ── membership ──────────────────────────────────────────────────────────

    def create(self, name, spec="", /, *args, **options):
        """
        Build a listener bound to this registry and attach it.

        Forms
        - create(name)
        - create(name, spec)
        - create(name, spec, tags)
        - create(name, spec, minargs, maxargs)
        - create(name, spec, tags, minargs, maxargs)

        Keyword options are forwarded to Listener (help, authority, protected, ...).
        """
        match args:
            case ():
                tags, arity = (), ()
            case (int(), int()):
                tags, arity = (), args
            case (tags,):
                arity = ()
            case (tags, int(), int()):
                arity = args[1:]
            case _:
                raise TypeError("create() takes a name, a spec, optional tags and an optional min/max pair")
        listener = Listener(name, spec, tags, *arity, registry=self, **options)
        return self.attach(name, listener)

    def _locate(self, object):
        if isinstance(object, Listener):
            for index, entry in enumerate(self._entries):
                if entry.listener is object:
                    return index
            return None
        if not isinstance(object, str):
            raise TypeError("expected a command name or a listener")
        key = self._hasher(object)
        for index, entry in enumerate(self._entries):
            if entry.hash == key and entry.name == object:
                return index
        return None

    def attach(self, name, listener, /):
        """
        Append `listener` under `name`; returns the listener.

        A listener bound to no registry is adopted by this one.
        Raises ValueError when the name is taken, differs from the listener's own
        name, or the listener is already attached.
        """
        validate_name(name)
        if not isinstance(listener, Listener):
            raise TypeError("attach() second argument must be a listener")
        if name != listener.name:
            raise ValueError(f"cannot attach listener {listener.name!r} as {name!r}")
        if listener.registry is not None and listener.registry is not self:
            raise ValueError(f"listener {listener.name!r} belongs to another registry")
        if self._locate(listener) is not None:
            raise ValueError(f"listener {listener.name!r} is already attached")
        key = self._hasher(name)
        for entry in self._entries:
            if entry.hash == key and entry.name == name:
                raise ValueError(f"command {name!r} already exists as {entry.name!r}")
            if entry.hash == key:
                logger.debug("command %r shares its name hash with %r", name, entry.name)
        if listener._registry is None:
            listener._registry = self
        self._entries.append(Entry(key, name, listener))
        logger.debug("attached command %r", name)
        return listener

    def detach(self, object, /):
        """
        Remove the entry matching a name or a listener; absent entries are ignored.
        """
        if (index := self._locate(object)) is not None:
            entry = self._entries.pop(index)
            logger.debug("detached command %r", entry.name)

    def attached(self, object, /):
        return self._locate(object) is not None

    def find(self, name, /):
        """
        Return the listener attached under `name`, or None.
        """
        index = self._locate(name)
        return self._entries[index].listener if index is not None else None

    def sort(self):
        self._entries.sort(key=operator.attrgetter("name"), reverse=True)

    def clear(self):
        """
        Drop every entry and both global callbacks.
        """
        self._entries.clear()
        self._on_auth = None
        self._on_fail = None

    # ── global callbacks ────────────────────────────────────────────────────

    @property
    def on_auth(self):
        return self._on_auth

    @on_auth.setter
    def on_auth(self, callback):
        if callback is not None and not callable(callback):
            raise TypeError("registry 'on_auth' must be callable or None")
        self._on_auth = callback

    @property
    def on_fail(self):
        return self._on_fail

    @on_fail.setter
    def on_fail(self, callback):
        if callback is not None and not callable(callback):
            raise TypeError("registry 'on_fail' must be callable or None")
        self._on_fail = callback

    def bind_auth(self, callback, /, env=Unset):
        if not callable(callback):
            raise TypeError("registry 'on_auth' must be callable")
        self.on_auth = callback if env is Unset else functools.partial(callback, env)
        return callback

    def bind_fail(self, callback, /, env=Unset):
        if not callable(callback):
            raise TypeError("registry 'on_fail' must be callable")
        self.on_fail = callback if env is Unset else functools.partial(callback, env)
        return callback

    # ── execution ───────────────────────────────────────────────────────────

    @property
    def resolver(self):
        return self._resolver

    @resolver.setter
    def resolver(self, resolver):
        if resolver is not None and not callable(resolver):
            raise TypeError("registry 'resolver' must be callable or None")
        self._resolver = resolver

    def resolve(self, invoker, /):
        """
        Map an invoker id to the session handed to callbacks.
        """
        return invoker if self._resolver is None else self._resolver(invoker)

    @property
    def context(self):
        """
        The context currently executing (in this task), or None.
        """
        return current()

    def dispatch(self, invoker, text, /):
        """
        Run `text` on behalf of `invoker` and return the tagged Outcome.
        """
        return dispatch(self, invoker, text)

    def run(self, invoker, text, /):
        """
        Run `text` on behalf of `invoker`; never raises.

        Returns the handler result on success, 0 when aborted, and -1 on failure.
        """
        return int(dispatch(self, invoker, text))


__all__ = (
    "Entry",
    "Registry",
    "MAXARGS",
)
