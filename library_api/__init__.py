"""Digital library REST API: authors, books (with lending) and contacts."""

__version__ = "1.0.0"
