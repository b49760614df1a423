"""Git status/log/branch parsing and workspace config for the ditloop desktop shell."""

__version__ = "0.1.0"
