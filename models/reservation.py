from datetime import datetime
from models.db import db

class Reservation(db.Model):
    __tablename__ = "reservations"

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.String(64), db.ForeignKey("products.id"), nullable=False, index=True)
    category_id = db.Column(db.String(64), nullable=False)

    # [start_date, end_date): pickup day included, return day excluded
    start_date = db.Column(db.Date, nullable=False, index=True)
    end_date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.String(5), nullable=True)  # HH:MM
    end_time = db.Column(db.String(5), nullable=True)

    # Delivery
    delivery = db.Column(db.Boolean, default=False, nullable=False)
    city = db.Column(db.String(100), nullable=True)
    address = db.Column(db.String(500), nullable=True)
    delivery_check = db.Column(db.String(20), nullable=True)  # ok, unverified
    delivery_distance_km = db.Column(db.Float, nullable=True)

    # Customer
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(20), nullable=False)
    company = db.Column(db.String(200), nullable=True)
    wants_invoice = db.Column(db.Boolean, default=False, nullable=False)
    invoice_nip = db.Column(db.String(20), nullable=True)
    invoice_company = db.Column(db.String(200), nullable=True)
    invoice_address = db.Column(db.String(500), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    # Calculated on the server, whole PLN
    days = db.Column(db.Integer, nullable=False)
    base_price = db.Column(db.Integer, nullable=False)
    delivery_fee = db.Column(db.Integer, nullable=False, default=0)
    weekend_pickup_fee = db.Column(db.Integer, nullable=False, default=0)
    total_price = db.Column(db.Integer, nullable=False)

    status = db.Column(db.String(20), nullable=False, default="pending", index=True)
    # status values: pending, confirmed, picked_up, returned, completed, rejected, cancelled
    status_changed_at = db.Column(db.DateTime, nullable=True)

    pickup_reminder_sent_at = db.Column(db.DateTime, nullable=True)
    return_reminder_sent_at = db.Column(db.DateTime, nullable=True)

    ip_address = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    product = db.relationship("Product", lazy="joined")

    __table_args__ = (
        db.CheckConstraint("days >= 1", name="ck_reservation_days_positive"),
        db.CheckConstraint("end_date >= start_date", name="ck_reservation_date_order"),
        db.CheckConstraint(
            "total_price = base_price + delivery_fee + weekend_pickup_fee",
            name="ck_reservation_total",
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product.name if self.product else self.product_id,
            "category_id": self.category_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "delivery": self.delivery,
            "city": self.city,
            "address": self.address,
            "delivery_check": self.delivery_check,
            "delivery_distance_km": self.delivery_distance_km,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "wants_invoice": self.wants_invoice,
            "invoice_nip": self.invoice_nip,
            "invoice_company": self.invoice_company,
            "invoice_address": self.invoice_address,
            "notes": self.notes,
            "days": self.days,
            "base_price": self.base_price,
            "delivery_fee": self.delivery_fee,
            "weekend_pickup_fee": self.weekend_pickup_fee,
            "total_price": self.total_price,
            "status": self.status,
            "status_changed_at": self.status_changed_at.isoformat() if self.status_changed_at else None,
            "created_at": self.created_at.isoformat(),
        }
