from sqlmodel import SQLModel, create_engine

from app.core.config import settings

connect_args = {}
if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
    # FastAPI serves sync endpoints from a threadpool
    connect_args["check_same_thread"] = False

engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, connect_args=connect_args)


def init_db() -> None:
    # Import models so their tables are registered on the metadata
    from app.models import node, pairing, user  # noqa: F401

    SQLModel.metadata.create_all(engine)
