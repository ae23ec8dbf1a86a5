"""
Traveling Salesperson Problem model: distances, tours and instance loading.
"""

from .tour import Tour, is_permutation
from .TSP import DistanceMatrix, TSPProblem

__all__ = ['DistanceMatrix', 'TSPProblem', 'Tour', 'is_permutation']
