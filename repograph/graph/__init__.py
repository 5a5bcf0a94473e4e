"""
Graph module for aggregating detector output into one workspace graph.
"""

from .aggregator import GraphAccumulator, GraphAggregator, build_workspace_graph

__all__ = [
    'GraphAccumulator',
    'GraphAggregator',
    'build_workspace_graph',
]
