from datetime import datetime
from models.db import db

class ProductNotification(db.Model):
    """A visitor waiting for a rented-out product to come back."""
    __tablename__ = "product_notifications"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.String(64), db.ForeignKey("products.id"), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="waiting")  # waiting, notified
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    notified_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        db.UniqueConstraint("product_id", "email", name="uq_product_notification_email"),
    )
