"""EasyBet - odds-locked wagering with escrowed pools, capped-proportional settlement and ticket resale."""

from easybet.exchange import EasyBet

__all__ = ["EasyBet"]
__version__ = "0.1.0"
