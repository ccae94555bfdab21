"""
Installment amortization: amount splitting, due dates and schedule building.
"""

from .calculator import (
    ScheduledPayment,
    base_amount_cents,
    compute_schedule,
    due_date_for,
    split_amount,
    validate_installment_count,
)
from .generator import PlanInput, generate_plan, parse_frequency, reschedule_remaining
from .settings import InstallmentPolicySettings, get_policy_settings, policy_settings

__all__ = [
    # Settings
    "InstallmentPolicySettings",
    "get_policy_settings",
    "policy_settings",
    # Calculator
    "ScheduledPayment",
    "base_amount_cents",
    "compute_schedule",
    "due_date_for",
    "split_amount",
    "validate_installment_count",
    # Generator
    "PlanInput",
    "generate_plan",
    "parse_frequency",
    "reschedule_remaining",
]
