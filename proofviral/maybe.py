"""
Explicit optional values.

A field that may not have been computed yet (a review's sentiment before
analysis runs) is exposed as either ``UNSET`` or ``Value(x)`` so callers
handle the "not computed" case on purpose instead of null-checking columns.
"""
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar('T')


class Unset:
    """Marker for a value that has not been computed."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return 'UNSET'


UNSET = Unset()


@dataclass(frozen=True)
class Value(Generic[T]):
    value: T


Maybe = Union[Unset, Value[T]]
