"""
Generation collaborators: map a fully assembled prompt to a text completion.
"""

from .generator import IGenerator
from .mock_generator import MockGenerator

__all__ = [
    'IGenerator',
    'MockGenerator'
]
