from .ledger import Claim, Ledger

__all__ = ["Claim", "Ledger"]
