"""
Herald command listeners: the metadata and callbacks of one named command.

What a listener holds
- identity: a unique name (no whitespace), used as the registry key.
- grammar: a spec string compiled into per-slot flags (see herald.specs), optional
  per-slot tags (names used by associative invocation), and an arity window
  minargs <= maxargs < MAXARGS.
- policy: authority level (negative disables the default check), protected (gates
  every authority check), suspended, associative (map vs. positional arguments).
- help/info: free help text and the generated usage string.
- callbacks: on_exec (required to run), on_auth, on_post, on_fail.

Lifecycle
- Listeners are usually created through Registry.create(), which attaches them.
- A listener may live detached (inspectable, not invocable) and be attached or
  detached explicitly; renaming an attached listener re-attaches it.

Example
    >>> from herald import Registry
    >>> registry = Registry()
    >>> kick = registry.create("kick", "i|g", ("id", "reason"), 1, 2)
    >>> kick.info
    '<id:integer> <*reason:...>'
    >>> @kick.bind_exec
    ... def on_kick(invoker, args):
    ...     return 1
"""
import functools
import logging
import operator
import re

from . import specs
from .specs import ArgFlag, MAXARGS
from .utils import *

logger = logging.getLogger(__name__)


def validate_name(name, /):
    """
    Reject names the dispatcher could never route to.
    """
    if not isinstance(name, str):
        raise TypeError("command name must be a string")
    if not name:
        raise ValueError("invalid or empty command name")
    if any(char.isspace() for char in name):
        raise ValueError("command names cannot contain spaces")
    return name


class ListenerType(type):
    """
    Metaclass providing stable, readable __repr__/__rich_repr__ for listeners.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens).
    - __displayable__ narrows which attributes __rich_repr__ shows.
    """
    __displayable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {"__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower()},
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__displayable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _callback(name, /):
    """
    Read/write property for one callback slot (callable or None).
    """
    @rename(name)
    def getter(self):
        return getattr(self, "_" + name)

    @rename(name)
    def setter(self, callback):
        if callback is not None and not callable(callback):
            raise TypeError(f"{type(self).__typename__} {name!r} must be callable or None")
        setattr(self, "_" + name, callback)

    return property(getter, setter)


def _binder(name, /):
    """
    Decorator-friendly binder for one callback slot.

    `env`, when given, is bound as the callback's first argument.
    """
    @rename("bind_" + name.removeprefix("on_"))
    def bind(self, callback, /, env=Unset):
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} {name!r} must be callable")
        setattr(self, name, callback if env is Unset else functools.partial(callback, env))
        return callback

    return bind


class Listener(metaclass=ListenerType):
    """
    One named command: spec, tags, arity, authority policy and callbacks.
    """

    __displayable__ = (
        "name",
        "spec",
        "info",
        "minargs",
        "maxargs",
        "authority",
        "protected",
        "associative",
        "attached",
    )

    def __init__(
            self,
            name,
            spec="",
            tags=(),
            minargs=0,
            maxargs=MAXARGS - 1,
            /,
            *,
            registry=Unset,
            help="",
            authority=-1,
            protected=False,
            suspended=False,
            associative=False,
    ):
        self._registry = coalesce(registry)
        self._name = validate_name(name)
        self._spec = ""
        self._flags = (ArgFlag.ANY,) * MAXARGS
        self._tags = [""] * MAXARGS
        self._help = ""
        self._info = ""
        self._authority = -1
        self._protected = False
        self._suspended = False
        self._associative = False
        self._minargs = 0
        self._maxargs = MAXARGS - 1
        self._on_exec = None
        self._on_auth = None
        self._on_post = None
        self._on_fail = None

        self._set_arity(minargs, maxargs)
        self.help = help
        self.authority = authority
        self.protected = protected
        self.suspended = suspended
        self.associative = associative
        self.tags = tags
        self.spec = spec

    def __str__(self):
        return self._name

    # ── identity ────────────────────────────────────────────────────────────

    @property
    def registry(self):
        return self._registry

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, name):
        validate_name(name)
        if not self.attached:
            self._name = name
            return
        previous = self._name
        self._registry.detach(self)
        self._name = name
        try:
            self._registry.attach(name, self)
        except ValueError:
            # keep the listener reachable under its old name
            self._name = previous
            self._registry.attach(previous, self)
            raise

    @property
    def attached(self):
        return self._registry is not None and self._registry.attached(self)

    def attach(self):
        if self._registry is None:
            raise TypeError(f"{type(self).__typename__} {self._name!r} is not bound to a registry")
        if self.attached:
            raise ValueError(f"{type(self).__typename__} {self._name!r} is already attached")
        self._registry.attach(self._name, self)

    def detach(self):
        if self._registry is not None:
            self._registry.detach(self)

    # ── grammar ─────────────────────────────────────────────────────────────

    @property
    def spec(self):
        return self._spec

    @spec.setter
    def spec(self, spec):
        # compile first: a bad spec leaves the previous one untouched
        self._flags = specs.compile(spec)
        self._spec = spec
        self.generate_info()

    @property
    def flags(self):
        return self._flags

    def get_flags(self, index, /):
        return self._flags[index] if 0 <= index < MAXARGS else ArgFlag.ANY

    @property
    def tags(self):
        return tuple(self._tags)

    @tags.setter
    def tags(self, tags):
        if tags is None:
            tags = ()
        if isinstance(tags, str):
            raise TypeError(f"{type(self).__typename__} tags must be a sequence of strings, not a string")
        tags = list(tags)
        if len(tags) > MAXARGS:
            raise ValueError(f"argument tags ({len(tags)}) are out of range ({MAXARGS})")
        for tag in tags:
            if not isinstance(tag, str):
                raise TypeError(f"{type(self).__typename__} tags must be strings")
        self._tags = tags + [""] * (MAXARGS - len(tags))

    def _check_index(self, index):
        if not isinstance(index, int) or not 0 <= index < MAXARGS:
            raise IndexError(f"argument ({index}) is out of total range ({MAXARGS})")

    def get_tag(self, index, /):
        self._check_index(index)
        return self._tags[index]

    def set_tag(self, index, name, /):
        self._check_index(index)
        if name is not None and not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} tags must be strings")
        self._tags[index] = name or ""

    def _set_arity(self, minargs, maxargs):
        for value in (minargs, maxargs):
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{type(self).__typename__} arity must be an integer")
            if not 0 <= value < MAXARGS:
                raise ValueError(f"argument ({value}) is out of total range ({MAXARGS})")
        if minargs > maxargs:
            raise ValueError(f"minimum argument ({minargs}) exceeds maximum ({maxargs})")
        self._minargs, self._maxargs = minargs, maxargs

    @property
    def minargs(self):
        return self._minargs

    @minargs.setter
    def minargs(self, value):
        self._set_arity(value, self._maxargs)

    @property
    def maxargs(self):
        return self._maxargs

    @maxargs.setter
    def maxargs(self, value):
        self._set_arity(self._minargs, value)

    # ── help ────────────────────────────────────────────────────────────────

    @property
    def help(self):
        return self._help

    @help.setter
    def help(self, text):
        if not isinstance(text, str):
            raise TypeError(f"{type(self).__typename__} 'help' must be a string")
        self._help = text

    @property
    def info(self):
        return self._info

    @info.setter
    def info(self, text):
        if not isinstance(text, str):
            raise TypeError(f"{type(self).__typename__} 'info' must be a string")
        self._info = text

    def generate_info(self, full=False):
        """
        Regenerate (and return) the usage string from flags, tags and arity.
        """
        self._info = specs.render(self._flags, self._tags, self._minargs, self._maxargs, full=full)
        return self._info

    # ── policy ──────────────────────────────────────────────────────────────

    @property
    def authority(self):
        return self._authority

    @authority.setter
    def authority(self, level):
        if not isinstance(level, int) or isinstance(level, bool):
            raise TypeError(f"{type(self).__typename__} 'authority' must be an integer")
        self._authority = level

    @property
    def protected(self):
        return self._protected

    @protected.setter
    def protected(self, toggle):
        self._protected = bool(toggle)

    @property
    def suspended(self):
        return self._suspended

    @suspended.setter
    def suspended(self, toggle):
        self._suspended = bool(toggle)

    @property
    def associative(self):
        return self._associative

    @associative.setter
    def associative(self, toggle):
        self._associative = bool(toggle)

    # ── callbacks ───────────────────────────────────────────────────────────

    on_exec = _callback("on_exec")
    on_auth = _callback("on_auth")
    on_post = _callback("on_post")
    on_fail = _callback("on_fail")

    bind_exec = _binder("on_exec")
    bind_auth = _binder("on_auth")
    bind_post = _binder("on_post")
    bind_fail = _binder("on_fail")

    # ── checks ──────────────────────────────────────────────────────────────

    def argcheck(self, index, tag, /):
        """
        Whether a parsed argument tagged `tag` is acceptable at slot `index`.
        """
        self._check_index(index)
        return specs.check(self._flags[index], tag)

    def authcheck(self, invoker, /):
        """
        Resolve whether `invoker` (a resolved session) may run this command.

        Only protected listeners are checked. The first available rule decides:
        the listener's on_auth, the registry's global on_auth, the authority
        level against the invoker's own `authority`, and finally allow.
        A callback that raises or returns None denies.
        """
        if not self._protected:
            return True
        if self._on_auth is not None:
            return _authorize(self._on_auth, invoker, self._name)
        if self._registry is not None and self._registry.on_auth is not None:
            return _authorize(self._registry.on_auth, invoker, self._name)
        if self._authority >= 0:
            return getattr(invoker, "authority", 0) >= self._authority
        return True


def _authorize(callback, invoker, name):
    try:
        result = callback(invoker)
    except Exception:
        logger.exception("authority inspector of %r raised; denying", name)
        return False
    return False if result is None else bool(result)


__all__ = (
    "Listener",
    "validate_name",
)

# The metaclass stays out of star-imports.
del ListenerType
