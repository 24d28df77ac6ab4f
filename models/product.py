from datetime import datetime
from models.db import db
from services.pricing import Tariff

class Product(db.Model):
    """Rentable equipment. Reference data seeded from the catalog, not edited at runtime."""
    __tablename__ = "products"

    id = db.Column(db.String(64), primary_key=True)  # slug, e.g. "puzzi-10-1"
    category_id = db.Column(db.String(64), nullable=False, index=True)
    name = db.Column(db.String(160), nullable=False)
    description = db.Column(db.Text, nullable=True)

    # Tariff, whole PLN
    price_per_day = db.Column(db.Integer, nullable=False)         # first day
    price_next_day = db.Column(db.Integer, nullable=False)        # days 2..N
    price_weekend = db.Column(db.Integer, nullable=False)         # Fri pickup, <= 3 days, flat
    transport_price = db.Column(db.Integer, nullable=False, default=0)
    weekend_pickup_fee = db.Column(db.Integer, nullable=False, default=0)

    # static fallback flag shown on the catalog
    available = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def tariff(self) -> Tariff:
        return Tariff(
            price_per_day=self.price_per_day,
            price_next_day=self.price_next_day,
            price_weekend=self.price_weekend,
            transport_price=self.transport_price,
            weekend_pickup_fee=self.weekend_pickup_fee,
        )
