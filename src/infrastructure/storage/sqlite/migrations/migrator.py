"""
Schema migrations for the ledger database.

Scripts are named vNNN_name.sql and run in version order. Every applied
version is recorded in schema_migrations with a checksum of its script.

An existing database is snapshotted with the SQLite backup API before
pending scripts run. If a script fails, or leaves foreign key
violations behind, the database is restored from the snapshot and
MigrationError is raised.
"""

import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
FILENAME_PATTERN = re.compile(r"v(\d+)_(\w+)\.sql")

REQUIRED_TABLES = (
    "schema_migrations",
    "suppliers",
    "warehouses",
    "items",
    "inventory_positions",
    "movement_ledger",
    "cost_layers",
    "document_sequences",
    "item_entries",
    "transfers",
    "transfer_lines",
    "withdrawals",
    "withdrawal_lines",
    "inventory_adjustments",
    "adjustment_lines",
    "monthly_weighted_averages",
)

LEDGER_TRIGGERS = ("movement_ledger_no_delete", "movement_ledger_no_update")


class MigrationError(RuntimeError):
    """A migration script could not be applied."""

    def __init__(self, version: str, name: str, reason: str):
        self.version = version
        self.name = name
        self.reason = reason
        super().__init__(f"v{version}_{name}: {reason}")


@dataclass(frozen=True)
class MigrationInfo:
    """A migration script on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @property
    def number(self) -> int:
        return int(self.version)

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = FILENAME_PATTERN.fullmatch(path.name)
        if match is None:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest[:16])


@dataclass
class MigrationResult:
    version: str
    name: str
    execution_time_ms: int


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Scripts in directory, lowest version first. Misnamed files are skipped."""
    found = []
    for path in directory.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError:
            logger.warning("migration_file_ignored", path=str(path))
    return sorted(found, key=lambda migration: migration.number)


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    cursor = await conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_migrations'"
    )
    if await cursor.fetchone() is None:
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    started = time.perf_counter()
    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        elapsed_ms = round((time.perf_counter() - started) * 1000)
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed_ms),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error(
            "migration_failed", version=migration.version, name=migration.name, error=str(e)
        )
        raise MigrationError(migration.version, migration.name, str(e)) from e

    cursor = await conn.execute("PRAGMA foreign_key_check")
    violations = await cursor.fetchall()
    if violations:
        logger.error(
            "migration_left_foreign_key_violations",
            version=migration.version,
            violations=len(violations),
        )
        raise MigrationError(
            migration.version, migration.name, f"{len(violations)} foreign key violations"
        )

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed_ms,
    )
    return MigrationResult(
        version=migration.version, name=migration.name, execution_time_ms=elapsed_ms
    )


async def _copy_database(source: Path, target: Path) -> None:
    async with aiosqlite.connect(source) as src, aiosqlite.connect(target) as dst:
        await src.backup(dst)


async def initialize_database(
    db_path: Path | None = None,
    snapshot_before: bool = True,
) -> list[MigrationResult]:
    """
    Apply pending migrations to db_path (default from settings).

    Returns the migrations applied by this run, empty when the schema is
    current.

    Raises:
        MigrationError: If a script fails. The database is left as it was
            before the run when it already existed.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    existed = db_path.exists()
    snapshot: Path | None = None
    results: list[MigrationResult] = []

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            applied = await _applied_checksums(conn)
            pending = []
            for migration in discover_migrations():
                recorded = applied.get(migration.version)
                if recorded is None:
                    pending.append(migration)
                elif recorded != migration.checksum:
                    logger.warning(
                        "migration_checksum_changed",
                        version=migration.version,
                        recorded=recorded,
                        current=migration.checksum,
                    )

            if not pending:
                return results

            logger.info(
                "migrating_database",
                db_path=str(db_path),
                pending=[m.version for m in pending],
            )
            if existed and snapshot_before:
                snapshot = db_path.with_name(f"{db_path.name}.pre-v{pending[0].version}")
                async with aiosqlite.connect(snapshot) as target:
                    await conn.backup(target)

            for migration in pending:
                results.append(await _apply(conn, migration))
    except MigrationError:
        if snapshot is not None:
            await _copy_database(snapshot, db_path)
            logger.warning("database_restored", snapshot=str(snapshot))
        raise
    finally:
        if snapshot is not None:
            snapshot.unlink(missing_ok=True)

    return results


# Name used by the API lifespan and manage.py
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending versions for db_path (default from settings)."""
    db_path = db_path or get_settings().storage.db_path
    versions = [m.version for m in discover_migrations()]
    exists = db_path.exists()

    applied: dict[str, str] = {}
    if exists:
        async with aiosqlite.connect(db_path) as conn:
            applied = await _applied_checksums(conn)

    applied_versions = sorted(applied, key=int)
    return {
        "exists": exists,
        "current_version": applied_versions[-1] if applied_versions else None,
        "applied_migrations": applied_versions,
        "pending_migrations": [v for v in versions if v not in applied],
        "total_migrations": len(versions),
    }


def _check(name: str, failed: bool, **details) -> dict:
    return {"check": name, "status": "FAIL" if failed else "PASS", **details}


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Foreign keys, page integrity, required tables and the ledger triggers."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()
        cursor = await conn.execute(
            "SELECT type, name FROM sqlite_master WHERE type IN ('table', 'trigger')"
        )
        schema = {(kind, name) for kind, name in await cursor.fetchall()}

    missing_tables = [t for t in REQUIRED_TABLES if ("table", t) not in schema]
    missing_triggers = [t for t in LEDGER_TRIGGERS if ("trigger", t) not in schema]
    return [
        _check("foreign_keys", bool(violations), violations=len(violations)),
        _check("integrity", integrity != "ok", result=integrity),
        _check("required_tables", bool(missing_tables), missing=missing_tables),
        _check("ledger_append_only", bool(missing_triggers), missing=missing_triggers),
    ]
