"""Multi-source disaster alert aggregation and route-safety scoring."""

__version__ = "0.4.0"
