from easybet.settlement.engine import SettlementEngine, compute_payouts

__all__ = ["SettlementEngine", "compute_payouts"]
