"""Personal finance tracker core: range aggregation, CSV codec and assistant."""

__version__ = "1.0.0"
