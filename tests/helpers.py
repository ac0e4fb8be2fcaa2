"""Builders and fake miners used across the test modules."""

import threading
import time

from consensus_mining.exceptions import MiningError
from consensus_mining.preprocessing.dataset import Schema
from consensus_mining.rule_mining.base import Itemset, MiningAdapter, RunResult


def make_itemset(schema: Schema, **assignments) -> Itemset:
    """Build an itemset from attribute name=value keyword arguments."""
    mapping = {}
    for name, value in assignments.items():
        attr_index = schema.index_of(name)
        mapping[attr_index] = schema.attribute(attr_index).index_of(value)
    return Itemset.from_mapping(mapping, schema.num_attributes)


def make_run(schema: Schema, *rules) -> RunResult:
    """Build a run from (antecedent dict, consequent dict) pairs."""
    return RunResult.from_rules([
        (make_itemset(schema, **ant), make_itemset(schema, **cons)) for ant, cons in rules
    ])


class StaticMiner(MiningAdapter):
    """Returns a copy of a fixed run for every partition."""

    def __init__(self, result: RunResult):
        self.result = result

    def mine(self, partition, parameters):
        return RunResult(list(self.result.antecedents), list(self.result.consequents),
                         summary=self.result.summary)


class FailingMiner(MiningAdapter):
    """Fails on the given partition indexes, returns an empty run otherwise."""

    def __init__(self, failing_indexes):
        self.failing_indexes = set(failing_indexes)

    def mine(self, partition, parameters):
        if partition.index in self.failing_indexes:
            raise MiningError(f"boom on {partition.index}")
        return RunResult([], [], summary=f"run {partition.index}")


class SlowMiner(MiningAdapter):
    """Sleeps while tracking how many calls run at the same time."""

    def __init__(self, delay: float):
        self.delay = delay
        self.active = 0
        self.max_active = 0
        self.calls = 0
        self._lock = threading.Lock()

    def mine(self, partition, parameters):
        with self._lock:
            self.active += 1
            self.calls += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(self.delay)
        finally:
            with self._lock:
                self.active -= 1
        return RunResult([], [])
