"""Core module - ambient services shared by the invoice GL engine.

This module holds environment configuration and structured logging.
Bookkeeping rules live in /invoice_gl/.
"""
