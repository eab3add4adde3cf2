from easybet.tickets.ledger import TicketLedger

__all__ = ["TicketLedger"]
