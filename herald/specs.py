r"""
Herald command specs: compile the compact argument grammar and render usage.

Grammar
- A spec is a string of single letters, one group per argument slot.
  • '|' advances to the next slot.
  • ',' and whitespace are inert separators inside a slot.
  • letters select type bits for the current slot:
      g  greedy (consume the rest of the text as one string)
      i  integer
      f  float
      b  boolean
      s  string
      l  string, forced lowercase
      u  string, forced uppercase
- "g" resets the slot to exactly GREEDY; any other letter adds its bits and clears
  GREEDY, so greedy capture and explicit types never coexist in one slot.

Example
    >>> compile("i|s,u|g")[:3]
    (<ArgFlag.INTEGER: 1>, <ArgFlag.STRING|UPPER: 40>, <ArgFlag.GREEDY: 64>)
    >>> render(compile("i|s,u|g"), ("id", "", "reason"), 1, 3)
    '<id:integer> <*string> <*reason:...>'

Design notes
- compile() is pure: it returns a fresh tuple or raises, so a caller that assigns the
  result only on success keeps its previous, fully-valid spec when compilation fails.
- render() is deterministic and side-effect free for the same flags/tags/arity.
"""
import enum

MAXARGS = 16

_TYPENAMES = {
    0: "any",
    1: "integer",
    2: "float",
    4: "boolean",
    8: "string",
}


class ArgFlag(enum.IntFlag):
    """
    Per-slot type bits (and the type-tag of a parsed argument).
    """
    ANY = 0
    INTEGER = 1
    FLOAT = 2
    BOOLEAN = 4
    STRING = 8
    LOWER = 16
    UPPER = 32
    GREEDY = 64


_LETTERS = {
    "i": ArgFlag.INTEGER,
    "f": ArgFlag.FLOAT,
    "b": ArgFlag.BOOLEAN,
    "s": ArgFlag.STRING,
    "l": ArgFlag.STRING | ArgFlag.LOWER,
    "u": ArgFlag.STRING | ArgFlag.UPPER,
}


def compile(spec, /, slots=MAXARGS):
    """
    Compile a spec string into exactly `slots` flag sets.

    Raises
    - TypeError: spec is not a string.
    - ValueError: unknown type letter, or a letter addressed past the last slot.
    """
    if not isinstance(spec, str):
        raise TypeError("compile() argument must be a string")

    flags = [ArgFlag.ANY] * slots
    index = 0

    for column, char in enumerate(spec):
        if char == "|":
            index += 1
            continue
        if char == "," or char.isspace():
            continue
        if char != "g" and char not in _LETTERS:
            raise ValueError(f"unknown type specifier {char!r} at argument {index} (column {column})")
        if index >= slots:
            raise ValueError(f"extraneous type specifiers: {index} >= {slots}")
        if char == "g":
            flags[index] = ArgFlag.GREEDY
        else:
            flags[index] = (flags[index] | _LETTERS[char]) & ~ArgFlag.GREEDY

    return tuple(flags)


def describe(flag, /):
    """
    Return the type name of a parsed argument tag or a single slot bit.
    """
    flag = ArgFlag(flag)
    if flag & (ArgFlag.LOWER | ArgFlag.UPPER | ArgFlag.GREEDY):
        return "string"
    return _TYPENAMES.get(int(flag), "unknown")


def check(flags, tag, /):
    """
    Whether a parsed argument with type-tag `tag` fits a slot with `flags`.

    Any accepts everything, an exact bit match is accepted, and a greedy slot
    accepts a string.
    """
    return (
        flags == ArgFlag.ANY
        or bool(flags & tag)
        or bool(flags & ArgFlag.GREEDY and tag & ArgFlag.STRING)
    )


def render(flags, tags, minargs, maxargs, /, *, full=False):
    """
    Render the human-readable usage string for compiled flags.

    Each slot below `maxargs` becomes a block like "<*name:integer,float>":
    '*' marks slots past `minargs` (optional), "name:" appears for tagged slots,
    and the type list is "...", the enabled type names, or "any". Rendering stops
    after a greedy slot. Unless `full` is set, trailing slots with neither a tag
    nor a type are left out.
    """
    tags = tuple(tags) + ("",) * (len(flags) - len(tags))
    blocks = []

    for index in range(min(maxargs, len(flags))):
        if not full and not any(tags[i] or flags[i] != ArgFlag.ANY for i in range(index, maxargs)):
            break

        flag = flags[index]
        block = "<"
        if index >= minargs:
            block += "*"
        if tags[index]:
            block += tags[index] + ":"

        if flag & ArgFlag.GREEDY:
            block += "..."
        elif flag != ArgFlag.ANY:
            block += ",".join(
                _TYPENAMES[bit] for bit in (ArgFlag.INTEGER, ArgFlag.FLOAT, ArgFlag.BOOLEAN, ArgFlag.STRING)
                if flag & bit
            )
        else:
            block += "any"

        blocks.append(block + ">")
        if flag & ArgFlag.GREEDY:
            break

    return " ".join(blocks)


__all__ = (
    "MAXARGS",
    "ArgFlag",
    "compile",
    "describe",
    "check",
    "render",
)
