# fpams/db/init_db.py
from fpams import models  # noqa  (registers every table on Base.metadata)
from fpams.db.base import Base
from fpams.db.session import engine


def init_db():
    Base.metadata.create_all(bind=engine)
