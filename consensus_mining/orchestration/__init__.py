from .store import ResultStore
from .orchestrator import JobOrchestrator, BatchOutcome, JobFailure

__all__ = [
    'ResultStore',
    'JobOrchestrator',
    'BatchOutcome',
    'JobFailure'
]
