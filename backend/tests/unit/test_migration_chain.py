import importlib.util
from pathlib import Path

import farmledger.models  # noqa: F401
from farmledger.database import Base

BACKEND_DIR = Path(__file__).resolve().parents[2]


def _load_checker():
    spec = importlib.util.spec_from_file_location(
        "check_migration_chain", BACKEND_DIR / "scripts" / "check_migration_chain.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_revisions_form_a_single_chain() -> None:
    report = _load_checker().inspect_chain()

    assert report.ok, report.errors
    assert report.roots == ["20261019_0001"]
    assert report.heads == ["20261019_0005"]


def test_migrations_create_every_mapped_table() -> None:
    source = "\n".join(
        path.read_text(encoding="utf-8") for path in (BACKEND_DIR / "alembic" / "versions").glob("*.py")
    )
    for table in Base.metadata.tables:
        assert f'"{table}"' in source, f"no migration creates {table}"


def test_detects_a_second_head(tmp_path) -> None:
    (tmp_path / "a.py").write_text('revision = "a"\ndown_revision = None\n', encoding="utf-8")
    (tmp_path / "b.py").write_text('revision = "b"\ndown_revision = "a"\n', encoding="utf-8")
    (tmp_path / "c.py").write_text('revision = "c"\ndown_revision = "a"\n', encoding="utf-8")

    report = _load_checker().inspect_chain(tmp_path)

    assert not report.ok
    assert report.heads == ["b", "c"]
