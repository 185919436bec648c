# easybook/__init__.py
"""
easybook — hotel rating and service-level-agreement records on a transactional key-value ledger.
Two contracts share one CRUD pattern: a flat hotel-rating contract and a nested
Hotel → ServiceLevel → Agreement contract.
"""

__version__ = "0.1.0-dev"
