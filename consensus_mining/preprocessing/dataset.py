"""
Categorical data model shared by the full dataset and every partition.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class Attribute:
    """A named categorical dimension with an ordered domain of string values."""
    name: str
    values: Tuple[str, ...]

    def value(self, index: int) -> str:
        return self.values[index]

    def index_of(self, value: str) -> int:
        try:
            return self.values.index(value)
        except ValueError:
            raise KeyError(f"'{value}' is not in the domain of attribute '{self.name}'") from None

    def __len__(self):
        return len(self.values)


@dataclass(frozen=True)
class Schema:
    """
    Ordered attributes plus an optional class attribute.

    Schemas are never mutated; use with_class_index() to get a copy that
    designates a class attribute for class association rule rendering.
    """
    attributes: Tuple[Attribute, ...]
    class_index: Optional[int] = None
    _by_name: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'attributes', tuple(self.attributes))
        object.__setattr__(self, '_by_name', {a.name: i for i, a in enumerate(self.attributes)})
        if self.class_index is not None and not 0 <= self.class_index < len(self.attributes):
            raise IndexError(
                f"Class index {self.class_index} out of range for {len(self.attributes)} attributes"
            )

    @property
    def num_attributes(self) -> int:
        return len(self.attributes)

    @property
    def class_attribute(self) -> Optional[Attribute]:
        if self.class_index is None:
            return None
        return self.attributes[self.class_index]

    def attribute(self, index: int) -> Attribute:
        return self.attributes[index]

    def index_of(self, name: str) -> int:
        return self._by_name[name]

    def with_class_index(self, class_index: Optional[int]) -> 'Schema':
        return replace(self, class_index=class_index)

    def __len__(self):
        return len(self.attributes)

    def __iter__(self):
        return iter(self.attributes)


def _none_for_missing(series: pd.Series) -> pd.Series:
    return series.astype(object).where(series.notna(), None)


def _is_binary(values) -> bool:
    return len(values) <= 2 and set(values).issubset({0, 1, 0.0, 1.0, True, False})


def _to_categorical(series: pd.Series) -> Tuple[pd.Series, Tuple[str, ...]]:
    """Render a column as strings and return it with its ordered domain."""
    if isinstance(series.dtype, pd.CategoricalDtype):
        domain = tuple(str(c) for c in series.cat.categories)
        converted = series.astype(object).map(lambda v: None if pd.isna(v) else str(v))
        return _none_for_missing(converted), domain

    non_missing = series.dropna()
    unique_vals = list(non_missing.unique())
    if unique_vals and _is_binary(unique_vals):
        mapping = {0: 'False', 1: 'True', 0.0: 'False', 1.0: 'True', True: 'True', False: 'False'}
        converted = series.map(lambda v: None if pd.isna(v) else mapping[v])
        domain = tuple(v for v in ('False', 'True') if v in set(converted.dropna()))
        return _none_for_missing(converted), domain

    converted = series.map(lambda v: None if pd.isna(v) else str(v))
    domain = tuple(sorted(set(converted.dropna())))
    return _none_for_missing(converted), domain


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    Ordered rows of categorical values together with their schema.

    Each frame column corresponds to the schema attribute at the same
    position. A cell holds a domain value or a missing marker (None/NaN).
    """
    schema: Schema
    frame: pd.DataFrame
    name: str = 'dataset'

    def __post_init__(self):
        columns = list(self.frame.columns)
        expected = [a.name for a in self.schema]
        if columns != expected:
            raise ValueError(f"Frame columns {columns} do not match schema attributes {expected}")

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, name: str = 'dataset') -> 'Dataset':
        """
        Derive a schema from a DataFrame and wrap it.

        Categorical columns keep their category order; every other column
        gets its sorted distinct values (as strings) as domain. Binary 0/1
        columns become 'False'/'True'.
        """
        converted = {}
        attributes = []
        for col in frame.columns:
            values, domain = _to_categorical(frame[col])
            converted[str(col)] = values
            attributes.append(Attribute(name=str(col), values=domain))

        data = pd.DataFrame(converted, index=frame.index).reset_index(drop=True)
        return cls(schema=Schema(tuple(attributes)), frame=data, name=name)

    @property
    def num_rows(self) -> int:
        return len(self.frame)

    def rows(self) -> List[tuple]:
        return list(self.frame.itertuples(index=False, name=None))

    def __len__(self):
        return len(self.frame)


@dataclass(frozen=True, eq=False)
class Partition:
    """A contiguous block of dataset rows [start, stop) sharing the dataset's schema."""
    index: int
    start: int
    stop: int
    frame: pd.DataFrame
    schema: Schema
    name: str

    @property
    def num_rows(self) -> int:
        return len(self.frame)

    def rows(self) -> List[tuple]:
        return list(self.frame.itertuples(index=False, name=None))

    def __len__(self):
        return len(self.frame)
