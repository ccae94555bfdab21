"""
Installment policy settings.

Environment variables use the INSTALLMENT_ prefix:
    INSTALLMENT_MIN_INSTALLMENTS=2
    INSTALLMENT_MAX_INSTALLMENTS=36
    INSTALLMENT_PAYMENT_CATEGORY_PREFIX="CC Payment: "

Usage:
    from budget_installments.service.amortization.settings import policy_settings

    # Or create custom settings for testing
    custom = InstallmentPolicySettings(max_installments=12)
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class InstallmentPolicySettings(BaseSettings):
    """
    Bounds and conventions applied to every installment plan.

    All settings can be overridden via environment variables with INSTALLMENT_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="INSTALLMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Installment Count ===
    min_installments: int = Field(
        default=2,
        ge=2,
        description="Smallest number of installments a plan may have",
    )
    max_installments: int = Field(
        default=36,
        ge=2,
        description="Largest number of installments a plan may have",
    )
    default_frequency: str = Field(
        default="monthly",
        pattern="^(weekly|bi-weekly|monthly)$",
        description="Frequency used when a request does not name one",
    )

    # === Payment Category ===
    payment_category_prefix: str = Field(
        default="CC Payment: ",
        description="Prefix of the per-card category collecting repayments",
    )

    # === Reporting ===
    projection_default_months: int = Field(
        default=6,
        ge=1,
        description="Months covered by a projection when none are requested",
    )
    projection_max_months: int = Field(
        default=12,
        ge=1,
        description="Upper clamp for projection months",
    )
    report_active_plan_limit: int = Field(
        default=10,
        ge=1,
        description="Active plans listed in the report, by next due date",
    )
    report_obligation_months: int = Field(
        default=12,
        ge=1,
        description="Months of upcoming obligations listed in the report",
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "InstallmentPolicySettings":
        """Reject an inverted installment range."""
        if self.min_installments > self.max_installments:
            raise ValueError(
                f"min_installments ({self.min_installments}) > "
                f"max_installments ({self.max_installments})"
            )
        return self

    def payment_category_name(self, credit_card_name: str) -> str:
        """Name of the category that collects repayments for one card."""
        return f"{self.payment_category_prefix}{credit_card_name}"


@lru_cache
def get_policy_settings() -> InstallmentPolicySettings:
    """Get cached policy settings instance."""
    return InstallmentPolicySettings()


policy_settings = get_policy_settings()
