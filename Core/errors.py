"""
Exceptions raised by the optimisation engine.

Both are configuration-time failures: the engine validates its inputs before any
tour is constructed and has no transient or retryable error conditions.
"""


class InvalidConfiguration(ValueError):
    """Hyperparameters, distance matrices or tours that cannot be used."""


class DegenerateDistance(ArithmeticError):
    """A reciprocal would be taken of a zero or negative length."""
