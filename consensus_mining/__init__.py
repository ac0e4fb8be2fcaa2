"""
Partition Consensus Rule Mining

Runs association rule mining on disjoint partitions of a dataset and ranks
the rules the partitions agree on.
"""
__version__ = "0.1.0"
