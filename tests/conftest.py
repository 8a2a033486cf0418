"""
Pytest configuration and shared fixtures for Kinerja tests.

This file provides:
- Sample roster and performance blobs
- An in-memory SQLite session
- A FastAPI test client bound to that session
"""

import pytest
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models import employee  # noqa: F401  registers the employees table
from settings.database import Base, get_db

# ============================================================================
# Sample Data
# ============================================================================

ROSTER_TSV = "\n".join([
    "No\tNama\tNIP\tGol\tPangkat\tJabatan\tSub Jabatan",
    "1\tMUHAMMADUN, A.KS, M.I.Kom\t19660419 198910 1 001\tIV/c\tPembina Utama Muda\tPlt. Kepala Dinas Sosial\tProvinsi Kalimantan Selatan",
    "2\tMURJANI, S.Pd, MM\t19700101 199003 1 002\tIV/a\tPembina\tKepala Bidang Rehabilitasi Sosial\tBidang Rehabilitasi Sosial",
    "3\tSUSANTI, SE\t19800505 200501 2 003\tIII/c\tPenata\tKepala Seksi Perlindungan Sosial\tBidang Perlindungan dan Jaminan Sosial",
    "4\tRINA WATI\t-\t-\tPenata Muda\tPengadministrasi Umum\tStaff Sekretariat",
    "5\tBUDI SANTOSO\t19850303 201001 1 004\tIII/a\tPenata Muda\tAnalis Kebijakan\tBidang Hukum",
    "6\tTANPA GOLONGAN\t123\t\tPenata\tStaf\tSekretariat",
])

PERFORMANCE_CSV = "\n".join([
    "Timestamp,Penilai,Kode,Jabatan Penilai,"
    "1. Kualitas Kinerja [John Doe],2. Kerjasama [John Doe],"
    "1. Kualitas Kinerja [Jane Roe],2. Kerjasama [Jane Roe],"
    "1. Kualitas Kinerja [Ghost Person]",
    "2024-01-01,Reviewer A,123,Kepala Bidang Rehabilitasi Sosial,80,Baik,85,Sangat Baik,",
    "2024-01-02,Reviewer B,456,Staff,90,Kurang Baik,75,,abc",
    ",,,,",
])


@pytest.fixture
def roster_text() -> str:
    return ROSTER_TSV


@pytest.fixture
def performance_text() -> str:
    return PERFORMANCE_CSV


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def db_session() -> Generator:
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


# ============================================================================
# API Client Fixtures
# ============================================================================

@pytest.fixture
def client(db_session) -> Generator:
    """FastAPI test client using the in-memory session."""
    from fastapi.testclient import TestClient
    from settings.server import kinerja_app

    def override_get_db():
        yield db_session

    kinerja_app.dependency_overrides[get_db] = override_get_db
    with TestClient(kinerja_app) as test_client:
        yield test_client
    kinerja_app.dependency_overrides.clear()
