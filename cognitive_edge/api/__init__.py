"""HTTP interface for the Cognitive Edge Protocol service"""

from cognitive_edge.api.app import create_app

__all__ = ["create_app"]
