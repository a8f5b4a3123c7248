"""Exceptions raised by the propagation, source and chi^2 modules."""
from __future__ import annotations


class CRPropagationError(Exception):
    """Base class for all cosmic-ray propagation errors."""


class ConfigurationError(CRPropagationError, ValueError):
    """Invalid propagation or injection parameters."""


class DomainError(CRPropagationError, ValueError):
    """Argument outside the domain of a physical quantity (T < 0, empty data, ...)."""


class DataFormatError(CRPropagationError, ValueError):
    """A data file was readable but its records are malformed."""


class NumericalError(CRPropagationError, RuntimeError):
    """Quadrature non-convergence or a non-finite intermediate value."""


class DependencyError(CRPropagationError, RuntimeError):
    """A species was built before the species it depends on were solved."""


__all__ = [
    "CRPropagationError",
    "ConfigurationError",
    "DomainError",
    "DataFormatError",
    "NumericalError",
    "DependencyError",
]
