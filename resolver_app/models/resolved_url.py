from sqlalchemy import Column, DateTime, Integer, String
from resolver_app.database.connection import Base


class ResolvedUrlRecord(Base):
    """
    Table behind the SQL resolution store.

    sqlite_autoincrement makes SQLite use AUTOINCREMENT, so ids are
    never handed out again after rows are deleted (e.g. by a clear).
    """
    __tablename__ = "resolved_urls"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    original_url = Column(String, nullable=False)
    # Not unique: duplicate rejection is a service-level policy
    resolved_url = Column(String, nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False)
