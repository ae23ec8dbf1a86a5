"""
Genetic algorithm over tours: individuals, populations and their operators.
"""

from .individual import Individual
from .population import Population, order_crossover, swap_mutation

__all__ = ['Individual', 'Population', 'order_crossover', 'swap_mutation']
