"""FarmLedger: poultry-farm inventory ledger backend."""

__version__ = "1.0.0"
