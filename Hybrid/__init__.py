"""
Ant System / genetic algorithm hybrid.
"""

from .ga_hybrid import GAHybrid

__all__ = ['GAHybrid']
