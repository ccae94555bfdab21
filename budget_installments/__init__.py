"""
Budget Installments - Installment Plan Service

A FastAPI-based service that spreads credit-card purchases over dated
installments and posts each processed installment into the budget ledger.
"""

__version__ = "0.1.0"
