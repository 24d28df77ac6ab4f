from models import db
from models.product import Product

# (id, category, name, first day, next day, weekend, transport one-way, weekend pickup fee)
CATALOG = [
    ("puzzi-10-1", "odkurzacze-piorace", "Odkurzacz Piorący Kärcher Puzzi 10/1", 60, 50, 150, 25, 30),
    ("puzzi-8-1", "odkurzacze-piorace", "Odkurzacz Piorący Kärcher Puzzi 8/1 Anniversary", 50, 40, 120, 25, 30),
    ("nt-22-1", "odkurzacze-przemyslowe", "Odkurzacz Przemysłowy Kärcher NT 22/1 AP L", 45, 45, 150, 25, 30),
    ("nt-30-1", "odkurzacze-przemyslowe", "Odkurzacz Przemysłowy Kärcher NT 30/1 Tact Te L", 55, 45, 140, 25, 30),
    ("ad-4-premium", "odkurzacze-przemyslowe", "Odkurzacz Kominkowy Kärcher AD 4 Premium", 40, 30, 90, 25, 30),
    ("ozonmed-pro-10g", "ozonatory", "Ozonator powietrza Ozonmed Pro 10G", 80, 60, 180, 25, 30),
    ("af-100-h13", "oczyszczacze", "Oczyszczacz Powietrza Kärcher AF 100 H13", 50, 40, 120, 25, 30),
    ("dmuchawa-ab-20", "osuszanie", "Dmuchawa Kärcher AB 20 Ec", 40, 30, 90, 25, 30),
    ("sg-4-4", "parownice", "Parownica Kärcher SG 4/4", 70, 55, 170, 25, 30),
    ("es-1-7-bp", "dezynfekcja", "System do dezynfekcji Kärcher ES 1/7 Bp Pack", 60, 50, 150, 25, 30),
    ("wvp-10-adv", "myjki-do-okien", "Myjka Do Okien Kärcher WVP 10 Adv", 30, 20, 60, 25, 30),
]

def seed_products():
    existing = {p.id for p in Product.query.all()}
    for pid, category, name, per_day, next_day, weekend, transport, pickup_fee in CATALOG:
        if pid in existing:
            continue
        db.session.add(Product(
            id=pid,
            category_id=category,
            name=name,
            price_per_day=per_day,
            price_next_day=next_day,
            price_weekend=weekend,
            transport_price=transport,
            weekend_pickup_fee=pickup_fee,
        ))
    db.session.commit()
