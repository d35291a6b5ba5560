"""Application configuration settings."""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cost_math.reports import ReportLabels


class Settings(BaseSettings):
    """Configuration sourced from environment variables or `.env` files."""

    app_env: str = Field(default="development", description="Deployment environment name.")
    log_level: str = Field(default="INFO", description="Minimum logging level for the app.")
    log_json: bool = Field(default=False, description="Emit JSON log lines instead of plain text.")
    drift_epsilon: Decimal = Field(
        default=Decimal("0.01"),
        description="Tolerance between stored and recipe-derived product cost.",
    )

    # Report labels (shown to Italian-speaking staff by default)
    internal_label: str = Field(default="Interno", description="Salesperson label for internal orders")
    external_label: str = Field(default="Esterno", description="Label for external orders without a salesperson")
    unknown_label: str = Field(default="Sconosciuto", description="Label for dangling references")
    no_address_label: str = Field(default="N/A", description="Destination when no address is known")
    no_variants_label: str = Field(default="N/A", description="SKU export label for products without variants")
    unconfigured_variants_label: str = Field(
        default="Varianti non configurate", description="SKU export label for groups without options"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def report_labels(self) -> ReportLabels:
        return ReportLabels(
            internal=self.internal_label,
            external=self.external_label,
            unknown=self.unknown_label,
            no_address=self.no_address_label,
        )

    def sku_labels(self) -> dict[str, str]:
        return {"no_variants": self.no_variants_label, "unconfigured": self.unconfigured_variants_label}


__all__ = ["Settings"]
