"""Errors raised by gbm_sim."""


class SimulationError(ValueError):
    """Base class for gbm_sim errors."""


class DomainError(SimulationError):
    """Input outside the mathematical domain (empty data, non-positive prices)."""


class ConfigError(SimulationError):
    """Invalid run parameters, rejected before any simulation work."""
