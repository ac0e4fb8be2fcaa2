from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from consensus_mining.exceptions import ConfigurationError

VALID_METRICS = ['confidence', 'lift']
VALID_ALGORITHMS = ['apriori', 'fpgrowth']


@dataclass(frozen=True)
class MiningParameters:
    """
    Settings passed unchanged to every mining job of a batch.

    Support is lowered from upper_bound_min_support in steps of delta until
    num_rules rules are found or lower_bound_min_support is reached.
    class_index is 0-based; None mines general association rules.
    """
    num_rules: int = 10
    metric: str = 'confidence'
    min_metric: float = 0.6
    delta: float = 0.001
    lower_bound_min_support: float = 0.001
    upper_bound_min_support: float = 0.1
    class_index: Optional[int] = None
    algorithm: str = 'apriori'
    max_items: Optional[int] = None

    def __post_init__(self):
        if self.num_rules < 1:
            raise ConfigurationError(f"num_rules must be >= 1, got {self.num_rules}")
        if self.metric not in VALID_METRICS:
            raise ConfigurationError(f"Metric must be one of {VALID_METRICS}, got '{self.metric}'")
        if self.algorithm not in VALID_ALGORITHMS:
            raise ConfigurationError(f"Algorithm must be one of {VALID_ALGORITHMS}, got '{self.algorithm}'")
        if self.delta <= 0:
            raise ConfigurationError(f"delta must be > 0, got {self.delta}")
        for name in ('lower_bound_min_support', 'upper_bound_min_support'):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ConfigurationError(f"{name} must be in (0, 1], got {value}")
        if self.lower_bound_min_support > self.upper_bound_min_support:
            raise ConfigurationError(
                f"lower_bound_min_support ({self.lower_bound_min_support}) exceeds "
                f"upper_bound_min_support ({self.upper_bound_min_support})"
            )
        if self.class_index is not None and self.class_index < 0:
            raise ConfigurationError(f"class_index must be >= 0 or None, got {self.class_index}")
        if self.max_items is not None and self.max_items < 2:
            raise ConfigurationError(f"max_items must be >= 2 to form rules, got {self.max_items}")

    @staticmethod
    def class_index_from_cli(value: Optional[int]) -> Optional[int]:
        """
        Convert the 1-based command line class index to a 0-based one.

        None, zero and negative values switch class association mining off.
        """
        if value is None or value <= 0:
            return None
        return value - 1

    @property
    def class_association(self) -> bool:
        return self.class_index is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
