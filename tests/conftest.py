import os

# Required settings must exist before anything under app/ is imported
os.environ.setdefault("ELECTRONIC_INVOICE_URL", "https://invoice.test")
os.environ.setdefault("ELECTRONIC_INVOICE_USER", "pos-user")
os.environ.setdefault("ELECTRONIC_INVOICE_PASSWORD", "pos-secret")
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import Base
import app.models  # noqa: F401  (registers tables on Base.metadata)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
