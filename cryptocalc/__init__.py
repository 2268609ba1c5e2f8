"""Crypto investment return calculator."""
