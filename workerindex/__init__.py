"""Healthcare worker index: record models, validation, privacy, events and search."""

__version__ = "0.2.0"