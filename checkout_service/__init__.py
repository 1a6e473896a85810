"""Storefront checkout service: cart store and PayPal order proxy."""

__version__ = "1.0.0"
