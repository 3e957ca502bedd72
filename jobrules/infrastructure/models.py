"""
SQLAlchemy ORM model for the SQL document store.

Tables
------
* ``documents`` -- one row per document, addressed by
  (database_id, collection_id, document_id), with JSON attributes and a
  JSON list of wire-format permissions.

The composite primary key is what makes ``create`` an atomic
create-if-absent: a second insert for the same address fails with an
``IntegrityError``.
"""

from sqlalchemy import JSON, Column, DateTime, Index, String, func

from .database import Base


class DocumentModel(Base):
    __tablename__ = "documents"

    database_id = Column(String(64), primary_key=True)
    collection_id = Column(String(64), primary_key=True)
    document_id = Column(String(255), primary_key=True)

    data = Column(JSON, nullable=False, default=dict)
    permissions = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_documents_collection", "database_id", "collection_id"),
    )
