"""Artifact dependency graph: edges, layout, production steps, and builder."""

from __future__ import annotations

from ferrite_core.graph.builder import ArtifactGraphBuilder
from ferrite_core.graph.layout import PRODUCTION_EDGES, ArtifactLayout, is_leaf, sources_of

__all__ = [
    "PRODUCTION_EDGES",
    "ArtifactGraphBuilder",
    "ArtifactLayout",
    "is_leaf",
    "sources_of",
]
