"""Order encoding and decoding between canonical orders and Swyftx payloads."""

from swyftx.orders.translator import ORDER_TYPE_CODES, OrderTranslator

__all__ = ["ORDER_TYPE_CODES", "OrderTranslator"]
