"""
Shared fixtures: a fresh in-memory database per test, a TestClient wired to
it, users for each role with bearer headers, and a small seeded catalog.
"""
import os
from decimal import Decimal

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("ENABLE_REQUEST_LOGGING", "false")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import farmledger.models  # noqa: F401, E402
from farmledger.database import Base, configure_sqlite, get_db  # noqa: E402
from farmledger.main import app  # noqa: E402
from farmledger.models.catalog import Client, ExpenseType, MaterialName, MeasurementUnit, Medicine  # noqa: E402
from farmledger.models.farm import Farm, Warehouse  # noqa: E402
from farmledger.models.material import Material  # noqa: E402
from farmledger.models.user import ROLE_ADMIN, ROLE_FARMER, ROLE_SUB_ADMIN, User  # noqa: E402
from farmledger.utils.security import create_access_token  # noqa: E402


@pytest.fixture()
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(engine)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _add(db, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def _headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


# ── Users ─────────────────────────────────────────────────────────────────────

@pytest.fixture()
def admin_user(db):
    return _add(db, User(email="admin@farmledger.test", full_name="Admin", role=ROLE_ADMIN))


@pytest.fixture()
def sub_admin_user(db):
    return _add(db, User(email="auditor@farmledger.test", full_name="Auditor", role=ROLE_SUB_ADMIN))


@pytest.fixture()
def farmer_user(db):
    return _add(db, User(email="farmer@farmledger.test", full_name="Farmer", role=ROLE_FARMER))


@pytest.fixture()
def other_farmer_user(db):
    return _add(db, User(email="neighbour@farmledger.test", full_name="Neighbour", role=ROLE_FARMER))


@pytest.fixture()
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture()
def sub_admin_headers(sub_admin_user):
    return _headers(sub_admin_user)


@pytest.fixture()
def farmer_headers(farmer_user):
    return _headers(farmer_user)


@pytest.fixture()
def other_farmer_headers(other_farmer_user):
    return _headers(other_farmer_user)


# ── Farms & warehouses ────────────────────────────────────────────────────────

@pytest.fixture()
def farm(db, farmer_user):
    return _add(db, Farm(name="North Farm", location="Valley Road", user_id=farmer_user.id))


@pytest.fixture()
def warehouse(db, farm):
    return _add(db, Warehouse(name="North Store", farm_id=farm.id))


@pytest.fixture()
def other_warehouse(db, other_farmer_user):
    other_farm = _add(db, Farm(name="South Farm", user_id=other_farmer_user.id))
    return _add(db, Warehouse(name="South Store", farm_id=other_farm.id))


# ── Catalog ───────────────────────────────────────────────────────────────────

@pytest.fixture()
def unit(db):
    return _add(db, MeasurementUnit(unit_name="kg"))


@pytest.fixture()
def carton(db):
    return _add(db, MeasurementUnit(unit_name="carton"))


@pytest.fixture()
def corn(db):
    return _add(db, MaterialName(material_name="Corn"))


@pytest.fixture()
def soy(db):
    return _add(db, MaterialName(material_name="Soybean Meal"))


@pytest.fixture()
def layer_feed(db):
    return _add(db, MaterialName(material_name="Layer Feed"))


@pytest.fixture()
def medicine(db):
    return _add(db, Medicine(name="Amoxicillin", day_of_age="7"))


@pytest.fixture()
def expense_type(db):
    return _add(db, ExpenseType(name="Transport"))


@pytest.fixture()
def supplier(db):
    return _add(db, Client(name="Grain Co", type="supplier"))


@pytest.fixture()
def make_material(db):
    """Register an inventory record holding only an opening balance."""

    def _make(warehouse, material_name=None, medicine=None, unit=None, opening="0"):
        opening = Decimal(opening)
        return _add(
            db,
            Material(
                warehouse_id=warehouse.id,
                material_name_id=material_name.id if material_name is not None else None,
                medicine_id=medicine.id if medicine is not None else None,
                unit_id=unit.id if unit is not None else None,
                opening_balance=opening,
                purchases=Decimal("0"),
                sales=Decimal("0"),
                consumption=Decimal("0"),
                manufacturing=Decimal("0"),
                current_balance=opening,
            ),
        )

    return _make
