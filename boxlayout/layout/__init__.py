"""
layout — Pluggable layout algorithms for nested box diagrams.

This package contains the three interchangeable algorithms and the
coordinator that selects between them:

- GridLayoutAlgorithm: Uniform cells, optional fill strategy caps
- FlowLayoutAlgorithm: Rows and columns alternating by depth, with wrap hysteresis
- MixedFlowLayoutAlgorithm: Scored candidates mixing rows, columns and grids (default)

Each algorithm implements the BaseLayoutAlgorithm interface; LayoutManager
picks one per diagram and applies the per-parent overrides.
"""

from .base_algorithm import BaseLayoutAlgorithm, LayoutInput, LayoutResult
from .grid_algorithm import GridLayoutAlgorithm
from .flow_algorithm import FlowLayoutAlgorithm
from .mixed_flow_algorithm import MixedFlowLayoutAlgorithm, LayoutOption
from .factory import (
    AlgorithmNotRegisteredError,
    LayoutAlgorithmFactory,
    LayoutAlgorithmType,
    layout_algorithm_factory,
)
from .manager import LayoutManager

__all__ = [
    'BaseLayoutAlgorithm',
    'LayoutInput',
    'LayoutResult',
    'GridLayoutAlgorithm',
    'FlowLayoutAlgorithm',
    'MixedFlowLayoutAlgorithm',
    'LayoutOption',
    'AlgorithmNotRegisteredError',
    'LayoutAlgorithmFactory',
    'LayoutAlgorithmType',
    'layout_algorithm_factory',
    'LayoutManager',
    'get_algorithm',
]


def get_algorithm(algorithm_name: str) -> BaseLayoutAlgorithm:
    """Get an algorithm instance from the default factory by name."""
    return layout_algorithm_factory.create_algorithm(algorithm_name)
