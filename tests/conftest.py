import threading
from datetime import date, timedelta

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.admin_user import AdminUser
from models.reservation import Reservation
from security.password import hash_password
from services.distance import Coordinates, GeocoderUnavailable
from utils.seed import seed_products

DEPOT = Coordinates(50.0412, 21.9991)

ADMIN_EMAIL = "admin@wb-rent.pl"
ADMIN_PASSWORD = "correct-horse-battery"


class FakeGeocoder:
    """Resolves by substring match against a fixed gazetteer."""

    def __init__(self, places=None, fail=False):
        self.places = places if places is not None else {
            "Rzeszów": Coordinates(50.0412, 21.9991),
            "Łańcut": Coordinates(50.0687, 22.2294),
            "Kraków": Coordinates(50.0647, 19.9450),
        }
        self.fail = fail
        self.queries = []

    def geocode(self, query):
        self.queries.append(query)
        if self.fail:
            raise GeocoderUnavailable("service down")
        for name, point in self.places.items():
            if name.lower() in query.lower():
                return point
        return None


class EmailRecorder:
    def __init__(self, ok=True):
        self.ok = ok
        self.sent = []

    def __call__(self, to_email, subject, body):
        self.sent.append({"to": to_email, "subject": subject, "body": body})
        if self.ok:
            return True, None
        return False, "SMTP down"

    def subjects(self):
        return [m["subject"] for m in self.sent]


def upcoming(weekday: int, weeks_ahead: int = 1) -> date:
    """A date at least a week ahead falling on `weekday` (Mon=0)."""
    today = date.today()
    return today + timedelta(days=(weekday - today.weekday()) % 7 + 7 * weeks_ahead)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    app.extensions["geocoder"] = FakeGeocoder()
    with app.app_context():
        db.create_all()
        seed_products()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def geocoder(app):
    return app.extensions["geocoder"]


@pytest.fixture
def emails(monkeypatch):
    recorder = EmailRecorder()
    monkeypatch.setattr("utils.notifications.send_email", recorder)
    return recorder


@pytest.fixture
def admin(app):
    row = AdminUser(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD, rounds=4), full_name="Staff")
    db.session.add(row)
    db.session.commit()
    return row


@pytest.fixture
def admin_headers(client, admin):
    resp = client.post("/api/admin/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def make_reservation(app):
    def _make(product_id="nt-22-1", start=date(2026, 2, 1), end=date(2026, 2, 5), status="pending", **extra):
        fields = dict(
            product_id=product_id,
            category_id="odkurzacze-przemyslowe",
            start_date=start,
            end_date=end,
            name="Jan Kowalski",
            email="jan@example.com",
            phone="600700800",
            days=max(1, (end - start).days),
            base_price=100,
            delivery_fee=0,
            weekend_pickup_fee=0,
            total_price=100,
            status=status,
        )
        fields.update(extra)
        r = Reservation(**fields)
        db.session.add(r)
        db.session.commit()
        return r
    return _make


@pytest.fixture
def booking_payload():
    def _payload(**overrides):
        start = upcoming(0)  # Monday
        data = {
            "productId": "nt-22-1",
            "startDate": start.isoformat(),
            "endDate": (start + timedelta(days=2)).isoformat(),
            "startTime": "09:00",
            "endTime": "09:00",
            "delivery": False,
            "firstName": "Jan",
            "lastName": "Kowalski",
            "email": "jan@example.com",
            "phone": "+48 600 700 800",
        }
        data.update(overrides)
        return data
    return _payload


def run_concurrently(fn, count):
    """Call fn(i) from `count` threads released together; returns results in order."""
    barrier = threading.Barrier(count)
    results = [None] * count
    errors = []

    def worker(i):
        barrier.wait(timeout=10)
        try:
            results[i] = fn(i)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    assert errors == []
    return results


@pytest.fixture
def file_app(tmp_path):
    """App on a SQLite file so each thread gets its own connection."""

    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'wbrent.db'}"

    app = create_app(FileConfig)
    app.extensions["geocoder"] = FakeGeocoder()
    with app.app_context():
        db.create_all()
        seed_products()
        db.session.add(AdminUser(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD, rounds=4)))
        db.session.commit()

    yield app

    with app.app_context():
        db.drop_all()
        db.engine.dispose()
