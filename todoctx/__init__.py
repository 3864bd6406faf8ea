"""todoctx: assemble a size-bounded LLM prompt around a single TODO marker."""

__version__ = "0.4.0"
