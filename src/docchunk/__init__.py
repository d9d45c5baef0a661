"""docchunk: split documents into word-bounded passages."""

__version__ = "0.1.0"
