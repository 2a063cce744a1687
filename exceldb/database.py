from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config import Settings, get_settings


def make_engine(settings: Optional[Settings] = None) -> Engine:
    settings = settings or get_settings()
    return create_engine(settings.database_url, echo=settings.echo_sql)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine)
