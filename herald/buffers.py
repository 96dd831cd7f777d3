"""
Scratch buffer used by the parser to stage quoted string tokens.

A buffer is owned by one execution context and reused for every quoted token
of that context: it is rewound (not reallocated) before each token, so nothing
extracted from one token can leak into the next one.
"""


class ScratchBuffer:
    """
    Growable character buffer with an explicit capacity.

    The capacity is adjusted up front to the length of the text being parsed;
    writing past it is reported as an overflow by the caller.
    """

    __slots__ = ("_chars", "_size")

    def __init__(self, capacity=512, /):
        if not isinstance(capacity, int) or capacity < 0:
            raise ValueError("ScratchBuffer capacity must be a non-negative integer")
        self._chars = [""] * capacity
        self._size = 0

    @property
    def capacity(self):
        return len(self._chars)

    @property
    def full(self):
        return self._size >= len(self._chars)

    def __len__(self):
        return self._size

    def adjust(self, capacity, /):
        """
        Grow to at least `capacity` characters; never shrinks.
        """
        if capacity > len(self._chars):
            self._chars.extend([""] * (capacity - len(self._chars)))

    def rewind(self):
        self._size = 0

    def clear(self):
        """
        Rewind and wipe every slot.
        """
        self._chars = [""] * len(self._chars)
        self._size = 0

    def write(self, char, /):
        if self.full:
            raise OverflowError("scratch buffer capacity exceeded")
        self._chars[self._size] = char
        self._size += 1

    def unwrite(self):
        """
        Drop the last written character (used when an escape turns out to be one).
        """
        if self._size:
            self._size -= 1

    def getvalue(self):
        return "".join(self._chars[:self._size])

    def __repr__(self):
        return f"scratch-buffer(size={self._size!r}, capacity={self.capacity!r})"


__all__ = ("ScratchBuffer",)
