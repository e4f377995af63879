"""Dataset summary and transpose engine."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple
import copy
import logging

from ezchart.aggregates import (
    Number, extent, max_decimal_place, max_total, stable_union, thresholds, totals_by_key
)
from ezchart.config import SummarySettings
from ezchart.errors import EmptyDatasetError, RotateAlignmentError
from ezchart.series import (
    COORDINATE_KEYS, DataType, Dataset, MultiSeries, SingleSeries,
    iter_series, parse_dataset, point_number
)

logger = logging.getLogger(__name__)

Extent = Tuple[Optional[Number], Optional[Number]]


@dataclass(frozen=True)
class Summary:
    """Read-only aggregate snapshot of a dataset.

    Fields that do not apply to the dataset's shape are None.
    """
    data_type: DataType
    row_values_keys: Tuple[str, ...]
    column_keys: Tuple[str, ...]
    value_min: Number
    value_max: Number
    value_extent: Tuple[Number, Number]
    coordinates_min: Mapping[str, Optional[Number]]
    coordinates_max: Mapping[str, Optional[Number]]
    coordinates_extent: Mapping[str, Extent]
    thresholds: Tuple[float, ...]

    # Single series only
    row_key: Optional[str] = None
    row_total: Optional[Number] = None

    # Multi series only
    row_keys: Optional[Tuple[str, ...]] = None
    row_totals: Optional[Mapping[str, Number]] = None
    row_totals_max: Optional[Number] = None
    column_totals: Optional[Mapping[str, Number]] = None
    column_totals_max: Optional[Number] = None
    max_decimal_place: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        """Plain, JSON-friendly rendering using camelCase field names."""
        def plain(value):
            if isinstance(value, Mapping):
                return {k: plain(v) for k, v in value.items()}
            if isinstance(value, tuple):
                return [plain(v) for v in value]
            return value

        return {
            "dataType": int(self.data_type),
            "rowKey": self.row_key,
            "rowTotal": self.row_total,
            "rowKeys": plain(self.row_keys),
            "rowTotals": plain(self.row_totals),
            "rowTotalsMax": self.row_totals_max,
            "rowValuesKeys": plain(self.row_values_keys),
            "columnKeys": plain(self.column_keys),
            "columnTotals": plain(self.column_totals),
            "columnTotalsMax": self.column_totals_max,
            "valueMin": self.value_min,
            "valueMax": self.value_max,
            "valueExtent": plain(self.value_extent),
            "coordinatesMin": plain(self.coordinates_min),
            "coordinatesMax": plain(self.coordinates_max),
            "coordinatesExtent": plain(self.coordinates_extent),
            "maxDecimalPlace": self.max_decimal_place,
            "thresholds": plain(self.thresholds),
        }


class DataTransform:
    """Summary and rotate operations over one parsed dataset."""

    def __init__(self, dataset: Dataset, settings: Optional[SummarySettings] = None):
        self.dataset = dataset
        self.settings = settings or SummarySettings()
        self.data_type = dataset.data_type

    def summary(self) -> Summary:
        """
        Compute a fresh summary of the dataset.

        Raises:
            EmptyDatasetError: If the dataset holds no points
            NonNumericValueError: If a value or coordinate is not numeric
        """
        series_list = list(iter_series(self.dataset))

        values: List[Number] = []
        row_pairs: List[Tuple[str, Number]] = []
        column_pairs: List[Tuple[str, Number]] = []
        coordinates: Dict[str, List[Number]] = {axis: [] for axis in COORDINATE_KEYS}

        for series in series_list:
            for index, point in enumerate(series.values):
                value = point_number(point, series.key, index)
                values.append(value)
                row_pairs.append((series.key, value))
                column_pairs.append((point.key, value))

                # Points without an axis are skipped for that axis
                for axis in COORDINATE_KEYS:
                    if point.defines(axis):
                        coordinates[axis].append(point_number(point, series.key, index, axis))

        if not values:
            raise EmptyDatasetError("Dataset contains no data points")

        first_point = next(s.values[0] for s in series_list if s.values)
        value_min, value_max = extent(values)
        coordinates_extent = {axis: extent(coordinates[axis]) for axis in COORDINATE_KEYS}

        common = dict(
            data_type=self.data_type,
            row_values_keys=tuple(first_point.fields().keys()),
            column_keys=stable_union(tuple(p.key for p in s.values) for s in series_list),
            value_min=value_min,
            value_max=value_max,
            value_extent=(value_min, value_max),
            coordinates_min=MappingProxyType({axis: ext[0] for axis, ext in coordinates_extent.items()}),
            coordinates_max=MappingProxyType({axis: ext[1] for axis, ext in coordinates_extent.items()}),
            coordinates_extent=MappingProxyType(coordinates_extent),
        )

        bands = self.settings.threshold_bands

        if self.data_type == DataType.SINGLE_SERIES:
            logger.debug(f"Summarised single series '{self.dataset.key}': {len(values)} points")
            return Summary(
                **common,
                thresholds=thresholds(value_min, value_max, 0, bands),
                row_key=self.dataset.key,
                row_total=sum(values),
            )

        places = max_decimal_place(values, self.settings.decimal_place_cap)
        row_totals = totals_by_key(row_pairs)
        column_totals = totals_by_key(column_pairs)

        logger.debug(
            f"Summarised {len(series_list)} series: {len(values)} points, "
            f"{len(common['column_keys'])} columns"
        )
        return Summary(
            **common,
            thresholds=thresholds(value_min, value_max, places, bands),
            row_keys=tuple(s.key for s in series_list),
            row_totals=row_totals,
            row_totals_max=max_total(row_totals),
            column_totals=column_totals,
            column_totals_max=max_total(column_totals),
            max_decimal_place=places,
        )

    def rotate(self) -> List[Dict[str, Any]]:
        """
        Transpose a multi-series dataset.

        Each category position becomes a series keyed by the shared category
        key; its points carry the original point fields with ``key``
        replaced by the source series key.

        Returns:
            Freshly allocated list of ``{"key": ..., "values": [...]}`` dicts

        Raises:
            RotateAlignmentError: If the dataset is a single series, or the
                series differ in length or category keys
        """
        if isinstance(self.dataset, SingleSeries):
            raise RotateAlignmentError("Only multi-series datasets can be rotated")

        series_list = list(self.dataset)
        if not series_list:
            return []

        category_keys = [p.key for p in series_list[0].values]
        self._check_alignment(series_list, category_keys)

        rotated = []
        for position, category in enumerate(category_keys):
            values = []
            for series in series_list:
                fields = copy.deepcopy(series.values[position].fields())
                fields["key"] = series.key
                values.append(fields)
            rotated.append({"key": category, "values": values})

        logger.debug(f"Rotated {len(series_list)}x{len(category_keys)} dataset")
        return rotated

    @staticmethod
    def _check_alignment(series_list, category_keys: List[str]):
        """Every series must list the same category keys in the same order."""
        expected = len(category_keys)
        reference = series_list[0].key

        for series in series_list[1:]:
            if len(series.values) != expected:
                raise RotateAlignmentError(
                    f"Series '{series.key}' has {len(series.values)} points, "
                    f"expected {expected} (as in series '{reference}')"
                )

            for position, point in enumerate(series.values):
                if point.key != category_keys[position]:
                    raise RotateAlignmentError(
                        f"Series '{series.key}' point {position} has key '{point.key}', "
                        f"expected '{category_keys[position]}'"
                    )


def analyze(dataset: Any, settings: Optional[SummarySettings] = None) -> DataTransform:
    """
    Parse a dataset and return its transform.

    Args:
        dataset: Raw single-series mapping, list of series, or parsed model
        settings: Optional summary tuning (threshold bands, decimal cap)

    Returns:
        DataTransform exposing summary() and rotate()

    Raises:
        MalformedDatasetError: If the input matches neither dataset shape
    """
    parsed = parse_dataset(dataset)
    kind = "multi" if isinstance(parsed, MultiSeries) else "single"
    logger.debug(f"Classified dataset as {kind} series")
    return DataTransform(parsed, settings)
