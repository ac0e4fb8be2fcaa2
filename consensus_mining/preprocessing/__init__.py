"""
Preprocessing Module

Categorical data model and contiguous partitioning:
- Attribute, Schema, Dataset, Partition
- partition_dataset
"""
from .dataset import Attribute, Schema, Dataset, Partition
from .partitioning import partition_dataset, partition_bounds

__all__ = [
    'Attribute', 'Schema', 'Dataset', 'Partition',
    'partition_dataset', 'partition_bounds'
]
