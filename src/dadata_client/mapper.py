"""
Mapping between caller data and the cleansing API's multi-record shape.

The clean endpoints take an array of values and answer with an array of
records in the same order. Callers may pass one value, a list, or a
mapping of their own keys to values; results come back in the same shape.
"""

from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ApiError


@dataclass(frozen=True)
class FixedField:
    """Select one field of a response record."""

    name: str

    def resolve(self, record: Any) -> Any:
        """Return the field value, or False if the record does not have it."""
        if not isinstance(record, Mapping):
            return False
        value = record.get(self.name)
        if value is None:
            return False
        return value


@dataclass(frozen=True)
class Projection:
    """Compute a value from a whole response record."""

    fn: Callable[[Any], Any]

    def resolve(self, record: Any) -> Any:
        return self.fn(record)


Selector = FixedField | Projection


def _passport_number(record: Any) -> Any:
    if not isinstance(record, Mapping):
        return False
    series = record.get("series")
    number = record.get("number")
    if series is None or number is None:
        return False
    return f"{series} {number}"


# "<series> <number>", or False if either part is missing
passport_number = Projection(_passport_number)


def to_records(data: Any) -> tuple[list[Hashable], list[Any], bool]:
    """
    Split caller data into parallel key and value lists.

    Returns:
        (keys, values, single) where single is True when data was one
        scalar value wrapped under a synthetic key.
    """
    if isinstance(data, Mapping):
        return list(data.keys()), list(data.values()), False
    if isinstance(data, (list, tuple)):
        return list(range(len(data))), list(data), False
    return [0], [data], True


def map_results(
    keys: list[Hashable],
    records: Any,
    selector: Selector,
    single: bool,
    sequence: bool = False,
) -> Any:
    """
    Map response records back onto the caller's keys by position.

    Args:
        keys: Keys from to_records, in request order
        records: Decoded response, expected to be a list of records
        selector: How to extract a result from each record
        single: Return only the first result
        sequence: Return a list instead of a dict

    Raises:
        ApiError: if the response is not a list or has fewer records
            than were sent
    """
    if not isinstance(records, list):
        raise ApiError("Unexpected answer", status_code=200)
    if len(records) < len(keys):
        raise ApiError(
            f"Unexpected answer: sent {len(keys)} record(s), got {len(records)}",
            status_code=200,
        )

    if single:
        return selector.resolve(records[0])

    results = {key: selector.resolve(records[i]) for i, key in enumerate(keys)}
    if sequence:
        return list(results.values())
    return results
