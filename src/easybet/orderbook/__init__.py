from easybet.orderbook.engine import OrderBook, OrderBookView

__all__ = ["OrderBook", "OrderBookView"]
