from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from trivia.core.db import Base


class SchemaMigration(Base):
    __tablename__ = "schema_migrations"

    version = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(100), nullable=False)
    applied_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
