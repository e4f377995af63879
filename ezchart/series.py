"""Dataset models and the boundary parse that classifies raw input."""
from enum import IntEnum
from numbers import Integral, Real
from typing import Any, Callable, ClassVar, Dict, Iterator, Mapping, Tuple, Union
import math

from pydantic import (
    BaseModel, ConfigDict, PrivateAttr, RootModel, ValidationError, model_validator
)

from ezchart.errors import MalformedDatasetError, NonNumericValueError

COORDINATE_KEYS = ("x", "y", "z")
_POINT_FIELDS = ("key", "value") + COORDINATE_KEYS


class DataType(IntEnum):
    """Dataset shape discriminant."""
    SINGLE_SERIES = 1
    MULTI_SERIES = 2


class DataPoint(BaseModel):
    """A single labeled point. Unknown fields are kept as-is."""
    model_config = ConfigDict(extra="allow", frozen=True, coerce_numbers_to_str=True)

    key: str
    value: Any = None
    x: Any = None
    y: Any = None
    z: Any = None

    _field_order: Tuple[str, ...] = PrivateAttr(default=())

    @model_validator(mode="wrap")
    @classmethod
    def record_field_order(cls, data: Any, handler: Callable[[Any], "DataPoint"]) -> "DataPoint":
        """Remember the order the caller wrote the point's fields in."""
        point = handler(data)
        if isinstance(data, Mapping):
            point._field_order = tuple(str(name) for name in data)
        return point

    def defines(self, field: str) -> bool:
        """True when the caller supplied a non-null ``value`` or coordinate."""
        return field in self.model_fields_set and getattr(self, field) is not None

    def fields(self) -> Dict[str, Any]:
        """Supplied fields, declared and extra, in the caller's input order."""
        supplied = {
            name: getattr(self, name)
            for name in _POINT_FIELDS
            if name in self.model_fields_set
        }
        supplied.update(self.model_extra or {})
        order = [name for name in self._field_order if name in supplied]
        order += [name for name in supplied if name not in order]
        return {name: supplied[name] for name in order}


class Series(BaseModel):
    """A named, ordered collection of points."""
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    key: str
    values: Tuple[DataPoint, ...]


class SingleSeries(Series):
    """Dataset made of one series."""
    data_type: ClassVar[DataType] = DataType.SINGLE_SERIES


class MultiSeries(RootModel[Tuple[Series, ...]]):
    """Dataset made of an ordered sequence of series."""
    model_config = ConfigDict(frozen=True)

    data_type: ClassVar[DataType] = DataType.MULTI_SERIES

    def __iter__(self) -> Iterator[Series]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Series:
        return self.root[index]


Dataset = Union[SingleSeries, MultiSeries]


def parse_dataset(data: Any) -> Dataset:
    """
    Classify raw input as a single-series or multi-series dataset.

    A mapping carrying a top-level ``key`` is a single series; a list or
    tuple is a sequence of series. Everything else is rejected.

    Args:
        data: Raw dataset (dicts and lists) or an already parsed model

    Returns:
        Frozen SingleSeries or MultiSeries model

    Raises:
        MalformedDatasetError: If the input matches neither shape
    """
    if isinstance(data, (SingleSeries, MultiSeries)):
        return data

    try:
        if isinstance(data, Mapping) and "key" in data:
            return SingleSeries.model_validate(dict(data))
        if isinstance(data, (list, tuple)):
            return MultiSeries.model_validate(list(data))
    except ValidationError as e:
        raise MalformedDatasetError(f"Dataset validation failed: {e}") from e

    raise MalformedDatasetError(
        f"Expected a series mapping with a 'key' field or a list of series, "
        f"got {type(data).__name__}"
    )


def iter_series(dataset: Dataset) -> Iterator[Series]:
    """Yield the series of a dataset in order."""
    if isinstance(dataset, SingleSeries):
        yield dataset
    else:
        yield from dataset


def coerce_number(raw: Any, series_key: str, index: int, field: str) -> Union[int, float]:
    """
    Convert a point field to a finite number.

    Integers stay integers; numeric strings are parsed. Booleans, missing
    values, NaN and infinities are rejected.

    Raises:
        NonNumericValueError: If ``raw`` is not a finite number
    """
    number: Union[int, float, None] = None

    if raw is None or isinstance(raw, bool):
        number = None
    elif isinstance(raw, Integral):
        number = int(raw)
    elif isinstance(raw, Real):
        number = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                number = None

    if number is None or (isinstance(number, float) and not math.isfinite(number)):
        raise NonNumericValueError(series_key, index, field, raw)
    return number


def point_number(point: DataPoint, series_key: str, index: int, field: str = "value") -> Union[int, float]:
    """Coerce the ``value`` or a coordinate of ``point`` (see coerce_number)."""
    raw = getattr(point, field)
    return coerce_number(raw, series_key, index, field)
