"""ssht: run one shell command across many SSH hosts with pooled connections."""

__version__ = "0.2.0"
