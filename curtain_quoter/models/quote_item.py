from datetime import datetime
from sqlalchemy.orm import relationship
from curtain_quoter import db
from curtain_quoter.models.quote import new_id


class QuoteItem(db.Model):
    __tablename__ = "quote_items"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    quote_id = db.Column(
        db.String(36), db.ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    area = db.Column(db.String(100), nullable=True)
    window_id = db.Column(db.String(100), nullable=True)
    # カタログへは文字列で非正規化して保持（FKなし）
    system_type = db.Column(db.String(50), nullable=True)
    collection = db.Column(db.String(100), nullable=True)
    fabric_color = db.Column(db.String(100), nullable=True)
    fabric_code = db.Column(db.String(50), nullable=True)
    width = db.Column(db.Integer, nullable=True)  # mm
    height = db.Column(db.Integer, nullable=True)  # mm
    width_m = db.Column(db.Float, nullable=True)
    height_m = db.Column(db.Float, nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    quote = relationship("Quote", back_populates="items")

    def __repr__(self):
        return f"<QuoteItem id={self.id} quote_id={self.quote_id} window_id={self.window_id}>"
