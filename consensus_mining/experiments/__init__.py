from .config import (
    DataConfig,
    OrchestrationConfig,
    OutputConfig,
    ConsensusExperimentConfig
)
from .base import (
    ConsensusReport,
    load_data,
    create_miner,
    run_consensus_experiment
)

__all__ = [
    'DataConfig',
    'OrchestrationConfig',
    'OutputConfig',
    'ConsensusExperimentConfig',
    'ConsensusReport',
    'load_data',
    'create_miner',
    'run_consensus_experiment'
]
