"""Database migrations module."""

from entityhub.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    SchemaMigrator,
    discover_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "SchemaMigrator",
    "discover_migrations",
    "get_current_version",
    "get_migration_status",
    "initialize_database",
    "run_migrations",
    "verify_schema_integrity",
]
