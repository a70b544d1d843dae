"""
Algorithm drivers built on the state vector engine.

- ShorAlgorithm: integer factoring heuristic
- GroverSearch: amplitude amplification search
- QAOAAlgorithm: quadratic binary optimization
- QuantumMachineLearning: variational classifier and k-means
"""
from .shor import ShorAlgorithm, ShorResult, factor, find_order
from .grover import GroverSearch, GroverResult, optimal_iterations
from .qaoa import QAOAAlgorithm, QAOAResult
from .qml import (
    QuantumMachineLearning,
    DataPoint,
    QMLModel,
    ClassificationResult,
    ClusteringResult,
)

__all__ = [
    # Factoring
    'ShorAlgorithm', 'ShorResult', 'factor', 'find_order',
    # Search
    'GroverSearch', 'GroverResult', 'optimal_iterations',
    # Optimization
    'QAOAAlgorithm', 'QAOAResult',
    # Learning
    'QuantumMachineLearning', 'DataPoint', 'QMLModel',
    'ClassificationResult', 'ClusteringResult',
]
