from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from pathlib import Path

from consensus_mining.exceptions import ConfigurationError
from consensus_mining.rule_mining.parameters import MiningParameters
from consensus_mining.orchestration.orchestrator import DEFAULT_MAX_WORKERS, DEFAULT_POLL_INTERVAL

DEFAULT_NUM_PARTITIONS = 2


@dataclass
class DataConfig:
    path: str
    name: Optional[str] = None

    def __post_init__(self):
        if self.name is None:
            self.name = Path(self.path).stem

    def to_dict(self) -> Dict[str, Any]:
        return {'path': self.path, 'name': self.name}


@dataclass
class OrchestrationConfig:
    # Partition count and worker count are independent
    num_partitions: int = DEFAULT_NUM_PARTITIONS
    max_workers: int = DEFAULT_MAX_WORKERS
    poll_interval: float = DEFAULT_POLL_INTERVAL

    def __post_init__(self):
        if self.num_partitions < 1:
            raise ConfigurationError(f"num_partitions must be >= 1, got {self.num_partitions}")
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.poll_interval <= 0:
            raise ConfigurationError(f"poll_interval must be > 0, got {self.poll_interval}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'num_partitions': self.num_partitions,
            'max_workers': self.max_workers,
            'poll_interval': self.poll_interval
        }


@dataclass
class OutputConfig:
    output_dir: str = "./out"
    matches_filename: str = "rulematches.txt"
    rules_filename: str = "rules.txt"
    excel: bool = False
    keep_partitions: bool = False
    include_unmatched: bool = False

    def get_output_path(self) -> Path:
        path = Path(self.output_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def to_dict(self) -> Dict[str, Any]:
        return {
            'output_dir': self.output_dir,
            'excel': self.excel,
            'keep_partitions': self.keep_partitions,
            'include_unmatched': self.include_unmatched
        }


@dataclass
class ConsensusExperimentConfig:
    data: DataConfig
    miner_type: str = 'mlxtend'
    mining: MiningParameters = field(default_factory=MiningParameters)
    orchestration: OrchestrationConfig = field(default_factory=OrchestrationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        params = {'miner_type': self.miner_type}
        params.update({f"data_{k}": v for k, v in self.data.to_dict().items()})
        params.update(self.mining.to_dict())
        params.update(self.orchestration.to_dict())
        params.update(self.output.to_dict())
        return params
