"""
Error types raised across the consensus mining pipeline.
"""


class ConsensusMiningError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(ConsensusMiningError, ValueError):
    """Invalid settings detected before any partition or job is created."""


class MiningError(ConsensusMiningError, RuntimeError):
    """A mining adapter failed on a single partition."""


class InconsistentRunError(ConsensusMiningError, ValueError):
    """A run result whose antecedent and consequent sequences differ in length."""
