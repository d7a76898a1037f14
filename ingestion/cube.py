"""
JSON-stat cube parsing and flattening.

Eurostat's dissemination API returns a JSON-stat 2.0 dataset:
  id:        ["freq", "unit", "isco08", "geo", "time"]   dimension order
  size:      [1, 1, 1, 36, 12]                          cardinality per dimension
  dimension: {"geo": {"category": {"index": {"AT": 0, ...}}}, ...}
  value:     {"13": 528.1, ...}                         sparse, row-major flat index

The cube is validated once at the boundary (parse_cube) and then read
through the typed Cube object; nothing downstream touches the raw dict.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Union

logger = logging.getLogger(__name__)

GEO_DIM = "geo"
TIME_DIM = "time"


class MalformedCubeError(ValueError):
    """The document is not a usable JSON-stat cube."""


@dataclass(frozen=True)
class Cube:
    ids: tuple[str, ...]
    sizes: tuple[int, ...]
    categories: dict[str, dict[str, int]]   # dimension → label → position
    values: dict[int, float]                # flat index → value, nulls dropped

    def flat_index(self, coords: Mapping[str, int]) -> int:
        """
        Row-major offset for a coordinate.

        Each position is weighted by the product of the sizes of every
        dimension after it in `ids`. Dimensions missing from `coords` sit
        at position 0.
        """
        offset = 0
        stride = 1
        for dim, size in zip(reversed(self.ids), reversed(self.sizes)):
            pos = coords.get(dim, 0)
            if not 0 <= pos < size:
                raise MalformedCubeError(
                    f"position {pos} out of range for dimension '{dim}' (size {size})"
                )
            offset += pos * stride
            stride *= size
        return offset

    def latest_time(self) -> tuple[str, int]:
        """(label, position) of the time category with the highest position."""
        time_index = self.categories[TIME_DIM]
        label = max(time_index, key=time_index.__getitem__)
        return label, time_index[label]

    def value_at(self, coords: Mapping[str, int]) -> float | None:
        return self.values.get(self.flat_index(coords))


def parse_cube(document: Any) -> Cube:
    """
    Validate a JSON-stat document and convert it to a Cube.

    Raises MalformedCubeError naming the first missing or inconsistent key.
    """
    if not isinstance(document, Mapping):
        raise MalformedCubeError(
            f"cube must be a JSON object, got {type(document).__name__}"
        )

    for key in ("id", "size", "value", "dimension"):
        if key not in document or document[key] is None:
            raise MalformedCubeError(f"cube is missing '{key}'")

    ids = document["id"]
    sizes = document["size"]
    if not isinstance(ids, list) or not all(isinstance(d, str) for d in ids):
        raise MalformedCubeError("'id' must be a list of dimension names")
    if not isinstance(sizes, list) or not all(
        isinstance(s, int) and not isinstance(s, bool) and s >= 0 for s in sizes
    ):
        raise MalformedCubeError("'size' must be a list of non-negative integers")
    if len(ids) != len(sizes):
        raise MalformedCubeError(
            f"'id' has {len(ids)} dimensions but 'size' has {len(sizes)}"
        )

    dimensions = document["dimension"]
    if not isinstance(dimensions, Mapping):
        raise MalformedCubeError("'dimension' must be an object")

    categories: dict[str, dict[str, int]] = {}
    for dim in (GEO_DIM, TIME_DIM):
        if dim not in ids:
            raise MalformedCubeError(f"cube has no '{dim}' dimension in 'id'")
        categories[dim] = _category_index(dimensions, dim, required=True)
    for dim in ids:
        if dim not in categories and dim in dimensions:
            categories[dim] = _category_index(dimensions, dim, required=False)

    if not categories[TIME_DIM]:
        raise MalformedCubeError("'time' dimension has no categories")

    for dim, index in categories.items():
        size = sizes[ids.index(dim)]
        for label, pos in index.items():
            if not 0 <= pos < size:
                raise MalformedCubeError(
                    f"category '{label}' of '{dim}' has position {pos} outside size {size}"
                )

    return Cube(
        ids=tuple(ids),
        sizes=tuple(sizes),
        categories=categories,
        values=_parse_values(document["value"]),
    )


def _category_index(dimensions: Mapping, dim: str, required: bool) -> dict[str, int]:
    entry = dimensions.get(dim)
    index = None
    if isinstance(entry, Mapping) and isinstance(entry.get("category"), Mapping):
        index = entry["category"].get("index")

    if index is None:
        if required:
            raise MalformedCubeError(f"cube is missing 'dimension.{dim}.category.index'")
        return {}

    # JSON-stat allows the index as an ordered list of labels
    if isinstance(index, list):
        return {label: pos for pos, label in enumerate(index)}
    if isinstance(index, Mapping):
        try:
            return {str(label): int(pos) for label, pos in index.items()}
        except (TypeError, ValueError) as exc:
            raise MalformedCubeError(
                f"'dimension.{dim}.category.index' has a non-integer position"
            ) from exc
    raise MalformedCubeError(f"'dimension.{dim}.category.index' must be an object or list")


def _parse_values(raw: Any) -> dict[int, float]:
    """Accept the sparse object form and the dense array form."""
    if isinstance(raw, Mapping):
        items = raw.items()
    elif isinstance(raw, list):
        items = enumerate(raw)
    else:
        raise MalformedCubeError("'value' must be an object or list")

    values: dict[int, float] = {}
    for key, value in items:
        if value is None:
            continue
        try:
            number = float(value)
            index = int(key)
        except (TypeError, ValueError) as exc:
            raise MalformedCubeError(f"'value' entry {key!r} is not numeric") from exc
        # NaN and Infinity decode from JSON but are not data
        if math.isfinite(number):
            values[index] = number
    return values


def extract_latest_by_geo(
    cube: Union[Cube, Mapping[str, Any]],
    strict: bool = True,
) -> dict[str, float]:
    """
    Map every geo code to its value in the latest time period.

    Dimensions other than geo and time are pinned to their first category,
    so only single-valued filter dimensions (unit, isco08, age, ...) reduce
    correctly. Codes with no value at that cell are left out rather than
    reported as zero.

    With strict=False a malformed cube is logged and treated as empty.
    """
    if not isinstance(cube, Cube):
        try:
            cube = parse_cube(cube)
        except MalformedCubeError as exc:
            if strict:
                raise
            logger.warning("Malformed cube treated as empty: %s", exc)
            return {}

    if not cube.values:
        return {}

    _, latest_pos = cube.latest_time()

    result: dict[str, float] = {}
    for code, geo_pos in cube.categories[GEO_DIM].items():
        value = cube.value_at({GEO_DIM: geo_pos, TIME_DIM: latest_pos})
        if value is not None:
            result[code] = value
    return result


def latest_year(cube: Cube) -> int | None:
    """Year of the latest time category, or None if the label is not a year."""
    label, _ = cube.latest_time()
    if len(label) < 4 or not label[:4].isdigit():
        return None
    return int(label[:4])
