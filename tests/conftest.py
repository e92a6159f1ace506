# tests/conftest.py
import os
import tempfile
from types import SimpleNamespace

# keep the module-level engine in infra.db.base away from the real user data dir
os.environ.setdefault("CF_DATA_DIR", tempfile.mkdtemp(prefix="costflow-tests-"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.models import ProjectRole
from infra.db.base import Base, enable_sqlite_foreign_keys
import infra.db.models  # noqa: F401  (registers tables on Base.metadata)
from infra.receipts import LocalReceiptStore
from infra.services import build_service_dict


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    enable_sqlite_foreign_keys(engine)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def receipt_store(tmp_path):
    return LocalReceiptStore(tmp_path / "receipts")


@pytest.fixture
def services(session, receipt_store):
    built = build_service_dict(session, receipt_store=receipt_store, analysis_client=None)
    try:
        yield built
    finally:
        # the finance cache subscribes to the global domain events
        built["finance_service"].close()


@pytest.fixture
def team(services):
    """A project owned by ``owner`` with one admin, member and viewer each."""
    ps = services["project_service"]
    resolver = services["permission_resolver"]

    project = ps.create_project("owner", "Harbour Tower", budget=100000.0)
    owner_perms = resolver.resolve(project.id, "owner")
    ps.add_member(owner_perms, project.id, "admin", ProjectRole.ADMIN)
    ps.add_member(owner_perms, project.id, "member", ProjectRole.MEMBER)
    ps.add_member(owner_perms, project.id, "viewer", ProjectRole.VIEWER)

    return SimpleNamespace(
        project=project,
        perms=lambda user_id, project_id=None: resolver.resolve(project_id or project.id, user_id),
    )
