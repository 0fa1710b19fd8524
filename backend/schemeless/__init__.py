"""schemeless - semantic validation for Solr schema definition documents."""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
