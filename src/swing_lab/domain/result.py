"""Ok / Err values for parsing steps that reject input instead of raising."""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E


type Result[T, E] = Ok[T] | Err[E]


def value_or[T, E, D](result: Result[T, E], default: D) -> T | D:
    match result:
        case Ok(value):
            return value
        case _:
            return default


def partition[T, E](results: Iterable[Result[T, E]]) -> tuple[list[T], list[E]]:
    """Split results into accepted values and rejections, each in input order."""
    values: list[T] = []
    errors: list[E] = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)
    return values, errors
