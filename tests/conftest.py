"""Shared fixtures for the consensus mining tests."""

import pandas as pd
import pytest

from consensus_mining.preprocessing.dataset import Attribute, Dataset, Schema


@pytest.fixture
def color_size_schema() -> Schema:
    return Schema((
        Attribute('color', ('red', 'blue')),
        Attribute('size', ('small', 'large')),
    ))


@pytest.fixture
def numbered_dataset() -> Dataset:
    """Ten rows whose 'row' attribute records the original position."""
    frame = pd.DataFrame({
        'row': [str(i) for i in range(10)],
        'parity': ['even' if i % 2 == 0 else 'odd' for i in range(10)],
    })
    return Dataset.from_frame(frame, name='numbers')


@pytest.fixture
def correlated_frame() -> pd.DataFrame:
    """
    Twenty rows where color determines size exactly and shape is independent.

    Rows 0-9 are red/large, rows 10-19 blue/small, shape alternates.
    """
    return pd.DataFrame({
        'color': ['red'] * 10 + ['blue'] * 10,
        'size': ['large'] * 10 + ['small'] * 10,
        'shape': ['circle', 'square'] * 10,
    })
