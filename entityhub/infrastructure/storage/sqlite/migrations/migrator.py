"""
Versioned schema migrations for the compliance database.

Migration files live next to this module as vNNN_<name>.sql and are applied
in version order. Each applied file is recorded in schema_migrations with a
short sha256 so an edited file is reported instead of silently re-run.
An existing database file is copied aside first and put back when the run
fails with a SQLite error.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import aiosqlite

from entityhub.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
FILENAME_PATTERN = re.compile(r"v(?P<version>\d+)_(?P<name>.+)\.sql")

REQUIRED_TABLES = (
    "entities",
    "recipients",
    "filing_types",
    "entity_filings",
    "filing_tasks",
    "schema_migrations",
)


@dataclass(frozen=True)
class MigrationInfo:
    """One vNNN_<name>.sql file."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = FILENAME_PATTERN.fullmatch(path.name)
        if match is None:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(match["version"], match["name"], path, digest[:16])

    def read_sql(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class SchemaCheck:
    check: str
    passed: bool
    details: dict = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {"check": self.check, "status": "PASS" if self.passed else "FAIL", **self.details}


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files sorted by version; badly named files are skipped."""
    found = []
    for path in directory.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await SchemaMigrator.applied_checksums(conn)
    return max(applied, key=int) if applied else None


class SchemaMigrator:
    """Applies pending migrations to one database file."""

    def __init__(self, db_path: Path, migrations: list[MigrationInfo] | None = None):
        self.db_path = db_path
        self.migrations = migrations if migrations is not None else discover_migrations()

    @staticmethod
    async def applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
        try:
            cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
        except aiosqlite.OperationalError:
            # Fresh database, nothing recorded yet
            return {}
        return {version: checksum for version, checksum in await cursor.fetchall()}

    def pending(self, applied: dict[str, str]) -> list[MigrationInfo]:
        result = []
        for migration in self.migrations:
            recorded = applied.get(migration.version)
            if recorded is None:
                result.append(migration)
            elif recorded != migration.checksum:
                logger.warning(
                    "migration_checksum_changed",
                    version=migration.version,
                    recorded=recorded,
                    current=migration.checksum,
                )
        return result

    async def _apply(self, conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
        log = logger.bind(version=migration.version, migration=migration.name)
        log.info("applying_migration")
        started = time.perf_counter()

        def elapsed_ms() -> int:
            return int((time.perf_counter() - started) * 1000)

        try:
            await conn.executescript(migration.read_sql())
            await conn.execute(
                "INSERT OR REPLACE INTO schema_migrations "
                "(version, name, checksum, execution_time_ms) VALUES (?, ?, ?, ?)",
                (migration.version, migration.name, migration.checksum, elapsed_ms()),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            log.error("migration_failed", error=str(e))
            return MigrationResult(migration.version, migration.name, False, elapsed_ms(), str(e))

        log.info("migration_applied", execution_time_ms=elapsed_ms())
        return MigrationResult(migration.version, migration.name, True, elapsed_ms())

    async def migrate(self) -> list[MigrationResult]:
        """Apply pending migrations in order, stopping at the first failure."""
        results: list[MigrationResult] = []
        async with aiosqlite.connect(self.db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            if not self.migrations:
                logger.warning("no_migrations_found", directory=str(MIGRATIONS_DIR))
                return results

            for migration in self.pending(await self.applied_checksums(conn)):
                result = await self._apply(conn, migration)
                results.append(result)
                if not result.success:
                    break
                dangling = await _foreign_key_violations(conn)
                if dangling:
                    logger.error(
                        "foreign_keys_broken_after_migration",
                        version=migration.version,
                        violations=dangling,
                    )
                    results[-1] = MigrationResult(
                        result.version,
                        result.name,
                        False,
                        result.execution_time_ms,
                        f"{dangling} foreign key violation(s)",
                    )
                    break
        return results

    async def status(self) -> dict:
        pending_versions = [m.version for m in self.migrations]
        if not self.db_path.exists():
            return {
                "exists": False,
                "current_version": None,
                "applied_migrations": [],
                "pending_migrations": pending_versions,
                "total_migrations": len(self.migrations),
            }
        async with aiosqlite.connect(self.db_path) as conn:
            applied = await self.applied_checksums(conn)
            current = await get_current_version(conn)
        return {
            "exists": True,
            "current_version": current,
            "applied_migrations": sorted(applied, key=int),
            "pending_migrations": [v for v in pending_versions if v not in applied],
            "total_migrations": len(self.migrations),
        }

    async def checks(self) -> list[SchemaCheck]:
        async with aiosqlite.connect(self.db_path) as conn:
            violations = await _foreign_key_violations(conn)

            cursor = await conn.execute("PRAGMA integrity_check")
            (integrity,) = await cursor.fetchone()

            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            tables = {name for (name,) in await cursor.fetchall()}

        missing = [t for t in REQUIRED_TABLES if t not in tables]
        return [
            SchemaCheck("foreign_keys", violations == 0, {"violations": violations}),
            SchemaCheck("integrity", integrity == "ok", {"result": integrity}),
            SchemaCheck("required_tables", not missing, {"missing": missing}),
        ]


async def _foreign_key_violations(conn: aiosqlite.Connection) -> int:
    cursor = await conn.execute("PRAGMA foreign_key_check")
    return len(await cursor.fetchall())


def _backup(db_path: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}{db_path.suffix}")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database up to the latest schema version.

    Returns one result per migration attempted; an empty list means the
    schema was already current. The pre-run backup is removed when every
    migration succeeds and restored when SQLite raises.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = _backup(db_path) if create_backup_before and db_path.exists() else None

    try:
        results = await SchemaMigrator(db_path).migrate()
    except aiosqlite.Error as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path is not None:
            shutil.copy2(backup_path, db_path)
            logger.info("database_restored_from_backup", backup_path=str(backup_path))
        raise

    if backup_path is not None and all(r.success for r in results):
        backup_path.unlink()
    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    return await SchemaMigrator(db_path or get_settings().storage.db_path).status()


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Foreign key, integrity and required-table checks as PASS/FAIL dicts."""
    migrator = SchemaMigrator(db_path or get_settings().storage.db_path)
    return [check.as_dict() for check in await migrator.checks()]
