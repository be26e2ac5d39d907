# ShipShape warehouse tracker
# Trailer, shipment and stock-check records kept in a local key-value store
# v1.0.0



# Library declaration and packages to be installed
import os
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
load_dotenv()

# Configure according to the deployment's storage url, a local sqlite file by default :
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./shipshape.db")


def build_engine(database_url: str) -> Engine:
    """Create an engine for the key-value storage database."""
    return create_engine(
        database_url,

        connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},

        pool_pre_ping=True

    )


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


engine = build_engine(DATABASE_URL)

SessionLocal = build_session_factory(engine)

Base = declarative_base()


def init_db(bind: Engine = engine) -> None:
    """Create the storage tables if they do not exist yet."""
    import models.storage_slot  # noqa: F401

    Base.metadata.create_all(bind=bind)
