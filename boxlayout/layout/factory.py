"""
factory.py — Registry of layout algorithms keyed by type name.

A module-level factory comes pre-registered with the three built-in
algorithms. Additional algorithms can be registered at runtime.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Type, Union

from .base_algorithm import BaseLayoutAlgorithm
from .flow_algorithm import FlowLayoutAlgorithm
from .grid_algorithm import GridLayoutAlgorithm
from .mixed_flow_algorithm import MixedFlowLayoutAlgorithm

logger = logging.getLogger(__name__)


class LayoutAlgorithmType(str, Enum):
    """Built-in algorithm names."""

    GRID = "grid"
    FLOW = "flow"
    MIXED_FLOW = "mixed-flow"


AlgorithmKey = Union[LayoutAlgorithmType, str]


class AlgorithmNotRegisteredError(ValueError):
    """Raised when an algorithm type has no registered implementation."""

    def __init__(self, algorithm_type: str, available: List[str]):
        self.algorithm_type = algorithm_type
        self.available = available
        super().__init__(
            f"Layout algorithm '{algorithm_type}' is not registered. Available: {available}"
        )


def algorithm_key(algorithm_type: AlgorithmKey) -> str:
    """Canonical registry key for an enum member or a name."""
    if isinstance(algorithm_type, LayoutAlgorithmType):
        return algorithm_type.value
    return str(algorithm_type).lower()


class LayoutAlgorithmFactory:
    """Creates layout algorithm instances by type name."""

    def __init__(self, register_defaults: bool = True):
        self._algorithms: Dict[str, Type[BaseLayoutAlgorithm]] = {}
        if register_defaults:
            self.register_algorithm(LayoutAlgorithmType.GRID, GridLayoutAlgorithm)
            self.register_algorithm(LayoutAlgorithmType.FLOW, FlowLayoutAlgorithm)
            self.register_algorithm(LayoutAlgorithmType.MIXED_FLOW, MixedFlowLayoutAlgorithm)

    def register_algorithm(
        self,
        algorithm_type: AlgorithmKey,
        algorithm_class: Type[BaseLayoutAlgorithm],
    ) -> None:
        """Register (or replace) the implementation for a type."""
        key = algorithm_key(algorithm_type)
        self._algorithms[key] = algorithm_class
        logger.info(f"Registered layout algorithm '{key}': {algorithm_class.__name__}")

    def unregister_algorithm(self, algorithm_type: AlgorithmKey) -> bool:
        """Remove a type; returns False if it was not registered."""
        return self._algorithms.pop(algorithm_key(algorithm_type), None) is not None

    def create_algorithm(self, algorithm_type: AlgorithmKey) -> BaseLayoutAlgorithm:
        """New instance of the algorithm registered for ``algorithm_type``."""
        key = algorithm_key(algorithm_type)
        algorithm_class = self._algorithms.get(key)
        if algorithm_class is None:
            raise AlgorithmNotRegisteredError(key, self.get_available_types())
        return algorithm_class()

    def get_available_types(self) -> List[str]:
        """Registered type names in registration order."""
        return list(self._algorithms.keys())

    def is_registered(self, algorithm_type: AlgorithmKey) -> bool:
        return algorithm_key(algorithm_type) in self._algorithms

    def get_algorithm_info(self, algorithm_type: AlgorithmKey) -> Optional[Dict[str, str]]:
        """Name and description of a registered type, or None."""
        algorithm_class = self._algorithms.get(algorithm_key(algorithm_type))
        if algorithm_class is None:
            return None
        return {
            "name": algorithm_class.name,
            "description": algorithm_class.description,
        }


# Default factory shared by managers created without one
layout_algorithm_factory = LayoutAlgorithmFactory()
