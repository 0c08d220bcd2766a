"""Append-only audit trail of document status transitions.

Rows outlive their document: document_id is a plain reference, so
deleting a document leaves its transitions in place.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from dokumenta.database import Base


class StatusHistory(Base):
    """One row per successful status transition."""
    
    __tablename__ = "document_status_history"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, nullable=False, index=True)
    old_status = Column(String(20), nullable=True)
    new_status = Column(String(20), nullable=False)
    changed_by = Column(Integer, ForeignKey("admin_users.id"), nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    # Relationships
    document = relationship(
        "Document",
        primaryjoin="foreign(StatusHistory.document_id) == Document.id",
        viewonly=True,
    )

    def __repr__(self):
        return f"<StatusHistory(document={self.document_id}, {self.old_status}->{self.new_status})>"
