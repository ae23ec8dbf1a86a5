"""
Core abstractions shared by every solver: problems, solutions, search loops,
configuration and error types.
"""

from .errors import DegenerateDistance, InvalidConfiguration
from .problem import ProblemInterface, Solution
from .search_algorithm import ProgressRecord, RunResult, SearchAlgorithm

__all__ = [
    'DegenerateDistance',
    'InvalidConfiguration',
    'ProblemInterface',
    'Solution',
    'ProgressRecord',
    'RunResult',
    'SearchAlgorithm',
]
