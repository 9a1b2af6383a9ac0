"""Result type for explicit error handling.

Service functions return `Ok(value)` or `Err(error)` instead of raising, so
every pipeline step reads as a sequence of checks:

    match extract_archive(archive, target):
        case Ok(count):
            console.print(f"{count} files")
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result holding a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result holding an error."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
