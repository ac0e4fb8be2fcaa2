"""
Base interfaces for partition rule miners.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from consensus_mining.exceptions import InconsistentRunError
from consensus_mining.preprocessing.dataset import Partition
from .parameters import MiningParameters

NO_VALUE = -1


@dataclass(frozen=True)
class Itemset:
    """
    Attribute -> value assignment over the full schema width.

    values[i] is the domain index assigned to attribute i, or NO_VALUE when
    the attribute is unconstrained. Equality and hashing are structural.
    """
    values: Tuple[int, ...]

    @classmethod
    def from_mapping(cls, mapping: Mapping[int, int], num_attributes: int) -> 'Itemset':
        values = [NO_VALUE] * num_attributes
        for attr_index, value_index in mapping.items():
            if not 0 <= attr_index < num_attributes:
                raise IndexError(f"Attribute index {attr_index} out of range for {num_attributes} attributes")
            if value_index < 0:
                raise ValueError(f"Value index must be >= 0, got {value_index}")
            values[attr_index] = value_index
        return cls(tuple(values))

    def value_at(self, attr_index: int) -> int:
        return self.values[attr_index]

    def items(self) -> Iterator[Tuple[int, int]]:
        """Yield (attribute index, value index) for every assigned attribute."""
        for attr_index, value_index in enumerate(self.values):
            if value_index != NO_VALUE:
                yield attr_index, value_index

    def to_dict(self) -> Dict[int, int]:
        return dict(self.items())

    @property
    def num_items(self) -> int:
        return sum(1 for v in self.values if v != NO_VALUE)

    def __len__(self):
        return len(self.values)


class Rule(NamedTuple):
    antecedent: Itemset
    consequent: Itemset


@dataclass
class RunResult:
    """
    Rules found by one mining invocation on one partition.

    antecedents[k] and consequents[k] together form rule k. The optional
    summary is free text describing the run, used for reporting.
    """
    antecedents: List[Itemset]
    consequents: List[Itemset]
    summary: Optional[str] = None

    def validate(self) -> 'RunResult':
        if len(self.antecedents) != len(self.consequents):
            raise InconsistentRunError(
                f"Run has {len(self.antecedents)} antecedents but {len(self.consequents)} consequents"
            )
        return self

    def rules(self) -> List[Rule]:
        return [Rule(a, c) for a, c in zip(self.antecedents, self.consequents)]

    @classmethod
    def from_rules(cls, rules: Sequence[Tuple[Itemset, Itemset]], summary: Optional[str] = None) -> 'RunResult':
        return cls(
            antecedents=[a for a, _ in rules],
            consequents=[c for _, c in rules],
            summary=summary
        )

    def __len__(self):
        return len(self.antecedents)


class MiningAdapter(ABC):
    """
    Base class for algorithms that mine association rules from one partition.

    Implementations must be safe to call from several worker threads at once
    with different partitions. Any exception raised from mine() is treated
    as a failure of that partition only.
    """

    @abstractmethod
    def mine(self, partition: Partition, parameters: MiningParameters) -> RunResult:
        """
        Mine association rules from a partition.

        Args:
            partition: Partition with categorical rows
            parameters: Mining parameters shared by every job of a batch

        Returns:
            RunResult with same-length antecedent and consequent sequences
        """
        pass
