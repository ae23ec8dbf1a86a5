"""
Ant System components: pheromone field, ants, colony and the Ant System loop.
"""

from .pheromone import PheromoneField, PheromoneView
from .ant import Ant, construct_tour
from .colony import Colony
from .ant_system import AntSystem

__all__ = ['Ant', 'AntSystem', 'Colony', 'PheromoneField', 'PheromoneView', 'construct_tour']
