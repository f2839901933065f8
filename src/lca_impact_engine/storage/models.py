"""SQLAlchemy models for the engine's backing datastore."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Float, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class LookupCacheEntry(Base):
    """Cached external lookup keyed by normalized search term and lookup kind."""

    __tablename__ = "lookup_cache"
    __table_args__ = (UniqueConstraint("search_term", "kind", name="uq_lookup_cache_term_kind"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    search_term: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[Any] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class ProductionSite(Base):
    """Link between a product and a facility that manufactures it."""

    __tablename__ = "product_production_sites"
    __table_args__ = (UniqueConstraint("product_id", "facility_id", name="uq_production_site"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    facility_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    production_volume: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    share_of_production: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    facility_intensity: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    attributable_emissions_per_unit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    data_source: Mapped[str] = mapped_column(String(32), nullable=False, default="Industry_Average")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class FacilityEmissionsRollup(Base):
    """Per-period facility intensity produced by the upstream emissions rollup."""

    __tablename__ = "facility_emissions_aggregated"
    __table_args__ = (Index("ix_facility_rollup_recency", "facility_id", "reporting_year", "reporting_period"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    facility_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reporting_year: Mapped[int] = mapped_column(Integer, nullable=False)
    reporting_period: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    calculated_intensity: Mapped[float | None] = mapped_column(Float)
    data_source_type: Mapped[str] = mapped_column(String(32), nullable=False, default="Secondary_Average")


class PRNTargetRow(Base):
    """Statutory recycling target for one material in one obligation year."""

    __tablename__ = "epr_prn_targets"
    __table_args__ = (UniqueConstraint("obligation_year", "material_code", name="uq_prn_target"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    obligation_year: Mapped[int] = mapped_column(Integer, nullable=False)
    material_code: Mapped[str] = mapped_column(String(8), nullable=False)
    material_name: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    recycling_target_pct: Mapped[float] = mapped_column(Float, nullable=False)


class PRNObligationRow(Base):
    __tablename__ = "epr_prn_obligations"
    __table_args__ = (
        UniqueConstraint("organization_id", "obligation_year", "material_code", name="uq_prn_obligation"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    obligation_year: Mapped[int] = mapped_column(Integer, nullable=False)
    material_code: Mapped[str] = mapped_column(String(8), nullable=False)
    material_name: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    total_tonnage_placed: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    recycling_target_pct: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    obligation_tonnage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    prns_purchased_tonnage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    prn_cost_per_tonne: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_prn_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="not_started")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
