from easybet.escrow.ledger import EscrowLedger

__all__ = ["EscrowLedger"]
