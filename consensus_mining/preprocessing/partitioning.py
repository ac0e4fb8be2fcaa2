"""
Contiguous partitioning of a dataset.

Rows are never shuffled or sampled: partition i holds the i-th block of
floor(n / p) rows and the last partition also takes the remainder. If the
source row order carries a systematic bias, the partitions inherit it, so
shuffle the dataset beforehand when independent partitions are required.
"""
from typing import List

from consensus_mining.exceptions import ConfigurationError
from .dataset import Dataset, Partition


def partition_bounds(num_rows: int, num_partitions: int) -> List[tuple]:
    """
    Compute the [start, stop) row range of every partition.

    Args:
        num_rows: Number of rows in the dataset
        num_partitions: Number of partitions (>= 1)

    Returns:
        List of (start, stop) tuples, one per partition
    """
    if isinstance(num_partitions, bool) or not isinstance(num_partitions, int):
        raise ConfigurationError(f"Number of partitions must be an integer, got {num_partitions!r}")
    if num_partitions < 1:
        raise ConfigurationError(f"Number of partitions must be >= 1, got {num_partitions}")

    base = num_rows // num_partitions
    bounds = []
    for i in range(num_partitions):
        start = i * base
        stop = num_rows if i == num_partitions - 1 else start + base
        bounds.append((start, stop))
    return bounds


def partition_dataset(dataset: Dataset, num_partitions: int) -> List[Partition]:
    """
    Split a dataset into contiguous, order-preserving partitions.

    When more partitions are requested than there are rows, the leading
    partitions are empty and the last one holds every row.

    Args:
        dataset: Dataset to split
        num_partitions: Number of partitions (>= 1)

    Returns:
        List of num_partitions Partitions whose concatenation is the dataset
    """
    partitions = []
    for i, (start, stop) in enumerate(partition_bounds(dataset.num_rows, num_partitions)):
        partitions.append(Partition(
            index=i,
            start=start,
            stop=stop,
            frame=dataset.frame.iloc[start:stop].reset_index(drop=True),
            schema=dataset.schema,
            name=f"Subsample {i} from {dataset.name}"
        ))
    return partitions
