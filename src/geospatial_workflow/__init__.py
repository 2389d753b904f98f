"""
Geospatial Measures Workflow

This package flattens nested GraphQL geospatial measure responses into
geometry-attached tabular records and exports them as geospatial files.
"""

__version__ = "0.1.0"
__description__ = "Flatten GraphQL geospatial measures into geometry-attached records"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "GeospatialWorkflowApp":
        from .main import GeospatialWorkflowApp
        return GeospatialWorkflowApp
    if name == "ResponseFlattener":
        from .processing import ResponseFlattener
        return ResponseFlattener
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "GeospatialWorkflowApp",
    "ResponseFlattener",
]
