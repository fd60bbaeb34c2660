"""planctl: hierarchical work-planning records with Markdown round-tripping."""

__version__ = "0.1.0"
