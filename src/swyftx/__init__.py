"""Async Swyftx REST connector exposing exchange-agnostic markets, candles and orders."""
