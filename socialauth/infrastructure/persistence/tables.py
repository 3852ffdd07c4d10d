"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL).

Table names are configurable, so tables are built per configuration rather
than declared once at import time.
"""

from dataclasses import dataclass

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.types import JSON


@dataclass(frozen=True)
class AuthTables:
    metadata: MetaData
    social_profiles: Table
    users: Table


def build_tables(
    social_profile_table: str = "social_profiles",
    user_table: str = "users",
) -> AuthTables:
    """Create the table definitions under the given names."""
    metadata = MetaData()

    # ========================================================================
    # SOCIAL PROFILES TABLE
    # ========================================================================
    social_profiles = Table(
        social_profile_table,
        metadata,
        Column("id", String, primary_key=True),  # UUID as string
        Column("user_id", String, nullable=True),  # Local user primary key
        Column("provider", String(50), nullable=False),  # "github", "orcid", etc.
        Column("identifier", String(255), nullable=False),  # Provider user id
        Column("username", String(255), nullable=True),
        Column("first_name", String(255), nullable=True),
        Column("last_name", String(255), nullable=True),
        Column("full_name", String(255), nullable=True),
        Column("email", String(255), nullable=True),
        Column("email_verified", Boolean, nullable=True),
        Column("birth_date", String(32), nullable=True),
        Column("gender", String(32), nullable=True),
        Column("access_token", JSON, nullable=True),  # Serialized AccessToken
        Column("extra", JSON, nullable=True),  # Provider attributes without a column
        Column("created_at", DateTime(timezone=True), nullable=False),
        Column("updated_at", DateTime(timezone=True), nullable=True),
        UniqueConstraint("provider", "identifier", name=f"uq_{social_profile_table}_provider"),
    )
    Index(f"ix_{social_profile_table}_user_id", social_profiles.c.user_id)

    # ========================================================================
    # USERS TABLE (reference schema for the default user repository)
    # ========================================================================
    users = Table(
        user_table,
        metadata,
        Column("id", String, primary_key=True),  # UUID as string
        Column("email", String(255), nullable=True),
        Column("username", String(255), nullable=True),
        Column("display_name", String(255), nullable=True),
        Column("password", String(255), nullable=True),
        Column("active", Boolean, nullable=False, default=True),
        Column("created_at", DateTime(timezone=True), nullable=False),
    )

    return AuthTables(metadata=metadata, social_profiles=social_profiles, users=users)
