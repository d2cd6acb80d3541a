# hospital_core/inventory/rules.py
"""
Stock rules shared by the API and the client.

Pure functions only: importable without Django settings.
"""
from __future__ import annotations


class StockStatus:
    OUT = "OUT"
    LOW = "LOW"
    OK = "OK"

    ALL = (OUT, LOW, OK)


class InsufficientStock(ValueError):
    def __init__(self, quantity: int, delta: int):
        self.quantity = quantity
        self.delta = delta
        super().__init__(
            f"Insufficient stock: cannot remove {-delta} unit(s), only {quantity} available."
        )


def classify_stock(quantity: int, minimum_stock: int) -> str:
    """
    OUT when empty, LOW while at or under the minimum, OK otherwise.
    """
    if quantity == 0:
        return StockStatus.OUT
    if quantity <= (minimum_stock or 0):
        return StockStatus.LOW
    return StockStatus.OK


def apply_delta(quantity: int, delta: int) -> int:
    """
    New quantity after a signed adjustment. Raises InsufficientStock below zero.
    """
    result = quantity + delta
    if result < 0:
        raise InsufficientStock(quantity, delta)
    return result
