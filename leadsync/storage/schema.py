"""Table definition for persisted leads.

Column names follow the CRM's existing ``leads`` table (including its
``fuelType`` / ``engin_capacity`` spellings); column keys follow ``Lead``
attribute names so rows can be built straight from ``Lead.to_dict()``.
"""
from sqlalchemy import Boolean, Column, DateTime, Integer, MetaData, String, Table, Text, UniqueConstraint, func

metadata = MetaData()

leads_table = Table(
    "leads",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text),
    Column("email", Text),
    Column("number", Text),
    Column("vehicle_brand", Text),
    Column("vehicle_model", Text),
    Column("vehicle_vrm", Text),
    Column("vehicle_title", Text),
    Column("vehicle_series", Text),
    Column("vehicle_reg", Text),
    Column("fuelType", Text, key="fuel_type"),
    Column("postcode", Text),
    Column("engin_capacity", Text),
    Column("vehicle_part", Text),
    Column("part_supplied", Boolean),
    Column("supply_only", Boolean),
    Column("used_condition", Boolean),
    Column("new_condition", Boolean),
    Column("reconditioned_condition", Boolean),
    Column("consider_both", Boolean),
    Column("consider_all_condition", Boolean),
    Column("vehicle_drive", Text),
    Column("collection_required", Boolean),
    Column("engine_code", Text),
    Column("description", Text),
    Column("source", Text, nullable=False),
    Column("raw", Text),
    Column("receivedAt", DateTime(timezone=True), key="received_at", nullable=False),
    Column("createdAt", DateTime(timezone=True), key="created_at", nullable=False, server_default=func.now()),
    Column("dedupe_key", String(64), nullable=False),
    UniqueConstraint("dedupe_key", name="uq_leads_dedupe_key"),
)
