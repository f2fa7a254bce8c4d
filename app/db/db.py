from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.config import DATABASE_URL


def build_engine(url: str = DATABASE_URL):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(url, pool_pre_ping=True)


engine = build_engine()


def init_db(bind=None):
    # table classes must be registered on the metadata before create_all
    from app.models import found_item, lost_report, notification, office, user  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session():
    with Session(engine) as session:
        yield session
