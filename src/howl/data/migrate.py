"""Forward-only SQL migrations for the content store schema.

The schema ships as numbered ``.sql`` files next to this module::

    howl/data/migrations/
        001_catalog.sql
        002_content.sql
        003_site.sql

Applied versions are tracked in a ``_howl_migrations`` table, so running
``migrate`` on every start is cheap and safe.

Usage::

    db = Database("sqlite:///howl.db")
    result = await migrate(db)
    print(result.summary)
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from howl.data.database import Database
from howl.data.errors import MigrationError

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

_TRACKING_TABLE = "_howl_migrations"

_CREATE_TRACKING_SQL = f"""
CREATE TABLE IF NOT EXISTS {_TRACKING_TABLE} (
    version    INTEGER PRIMARY KEY,
    name       TEXT    NOT NULL,
    applied_at TEXT    NOT NULL
)
"""


@dataclass(frozen=True, slots=True)
class Migration:
    """A single migration file."""

    version: int
    name: str
    sql: str


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """Result of running migrations."""

    applied: list[str]
    already_applied: int
    total_available: int

    @property
    def summary(self) -> str:
        if not self.applied:
            return f"Already up to date ({self.already_applied} migrations applied)"
        return f"Applied {len(self.applied)} migration(s): {', '.join(self.applied)}"


@dataclass(frozen=True, slots=True)
class _Version:
    version: int


def discover_migrations(directory: str | Path) -> list[Migration]:
    """Parse ``NNN_description.sql`` files from *directory*, sorted by version."""
    path = Path(directory)
    if not path.is_dir():
        msg = f"Migration directory does not exist: {path}"
        raise MigrationError(msg)

    migrations: list[Migration] = []
    for sql_file in sorted(path.glob("*.sql")):
        version_str, sep, _ = sql_file.stem.partition("_")
        if not sep:
            msg = f"Invalid migration filename: {sql_file.name} (expected NNN_description.sql)"
            raise MigrationError(msg)
        try:
            version = int(version_str)
        except ValueError:
            msg = f"Invalid migration version in {sql_file.name}: {version_str!r}"
            raise MigrationError(msg) from None

        sql = sql_file.read_text(encoding="utf-8").strip()
        if not sql:
            msg = f"Empty migration file: {sql_file.name}"
            raise MigrationError(msg)
        migrations.append(Migration(version=version, name=sql_file.stem, sql=sql))

    versions = [m.version for m in migrations]
    if len(versions) != len(set(versions)):
        msg = "Duplicate migration version numbers found"
        raise MigrationError(msg)

    return sorted(migrations, key=lambda m: m.version)


async def migrate(db: Database, directory: str | Path = MIGRATIONS_DIR) -> MigrationResult:
    """Apply pending migrations in version order.

    Each migration and its tracking row commit together, so a failed
    migration leaves no partial schema behind.

    Raises:
        MigrationError: If a migration fails or the directory is invalid.
            Later migrations are not attempted.
    """
    migrations = discover_migrations(directory)
    await db.execute(_CREATE_TRACKING_SQL)
    rows = await db.fetch(_Version, f"SELECT version FROM {_TRACKING_TABLE}")
    applied_versions = {row.version for row in rows}

    applied: list[str] = []
    for migration in migrations:
        if migration.version in applied_versions:
            continue
        try:
            async with db.transaction():
                await db.execute_script(migration.sql)
                await db.execute(
                    f"INSERT INTO {_TRACKING_TABLE} (version, name, applied_at) VALUES (?, ?, ?)",
                    migration.version,
                    migration.name,
                    datetime.now(UTC).isoformat(),
                )
        except Exception as exc:
            msg = f"Migration {migration.name} failed: {exc}"
            raise MigrationError(msg) from exc
        applied.append(migration.name)

    return MigrationResult(
        applied=applied,
        already_applied=len(applied_versions),
        total_available=len(migrations),
    )
