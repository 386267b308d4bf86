"""Ordered Ghostscript flag collections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Union


@dataclass(frozen=True)
class Flag:
    """
    A single command-line argument.

    ``Flag("-d", "JPEGQ", 90)`` renders as ``-dJPEGQ=90``; ``Flag("-r", value=300)``
    as ``-r300``; ``Flag.literal("in.pdf")`` as ``in.pdf``.
    """

    prefix: str
    name: str = ""
    value: Optional[object] = None

    @classmethod
    def define(cls, name: str, value: Optional[object] = None) -> "Flag":
        return cls("-d", name, value)

    @classmethod
    def string(cls, name: str, value: object) -> "Flag":
        return cls("-s", name, value)

    @classmethod
    def literal(cls, text: str) -> "Flag":
        return cls(text)

    def render(self) -> str:
        if not self.name:
            return self.prefix if self.value is None else f"{self.prefix}{self.value}"
        if self.value is None:
            return f"{self.prefix}{self.name}"
        return f"{self.prefix}{self.name}={self.value}"

    def __str__(self) -> str:
        return self.render()


FlagLike = Union[Flag, str]


class ParameterSet:
    """Append-only sequence of flags; duplicates and order are preserved."""

    def __init__(self, *flags: FlagLike) -> None:
        self._flags: List[Flag] = []
        self.append(*flags)

    def append(self, *flags: FlagLike) -> "ParameterSet":
        for flag in flags:
            self._flags.append(flag if isinstance(flag, Flag) else Flag.literal(str(flag)))
        return self

    def extend(self, other: "ParameterSet") -> "ParameterSet":
        return self.append(*other)

    def contains(self, text: str) -> bool:
        """Return True when an appended flag renders exactly as *text*."""

        return any(flag.render() == text for flag in self._flags)

    def __contains__(self, text: object) -> bool:
        return isinstance(text, str) and self.contains(text)

    def render(self) -> List[str]:
        return [flag.render() for flag in self._flags]

    def __iter__(self) -> Iterator[Flag]:
        return iter(list(self._flags))

    def __len__(self) -> int:
        return len(self._flags)

    def __repr__(self) -> str:
        return f"ParameterSet({' '.join(self.render())!r})"


__all__ = ["Flag", "FlagLike", "ParameterSet"]
