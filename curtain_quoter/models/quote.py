import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy.orm import relationship
from curtain_quoter import db


# 見積ステータス（テンプレ/Jinja互換のためstr継承）
class QuoteStatus(str, Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    APPROVED = "Approved"
    REJECTED = "Rejected"


def new_id():
    return str(uuid.uuid4())


class Quote(db.Model):
    __tablename__ = "quotes"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    customer_name = db.Column(db.String(200), nullable=False)
    project_name = db.Column(db.String(200), nullable=False)
    distributor_name = db.Column(db.String(200), nullable=True)
    quote_date = db.Column(db.String(10), nullable=True)  # YYYY-MM-DD
    status = db.Column(db.String(20), nullable=False, default=QuoteStatus.DRAFT.value)
    notes = db.Column(db.Text, nullable=True)
    currency = db.Column(db.String(3), nullable=False, default="USD")
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    items = relationship(
        "QuoteItem",
        back_populates="quote",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Quote id={self.id} project_name={self.project_name} status={self.status}>"
