"""vaultmd: scope-aware versioned content store."""

__version__ = "0.1.0"
