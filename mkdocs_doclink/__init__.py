"""
mkdocs-doclink — symbol cross-references for MkDocs.

Resolves {@link ...} references in documentation text against a registry of
exported symbols and renders them as links to the symbol pages, along with
helpers for signatures, summaries and source listing pages.
"""

__version__ = "1.0.0"
