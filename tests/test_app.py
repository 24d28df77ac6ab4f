from models.admin_user import AdminUser
from models.product import Product
from security.password import verify_password
from utils.emailer import send_email
from utils.seed import CATALOG, seed_products


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_unknown_endpoint_is_json_404(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Endpoint does not exist"}


def test_product_catalog(client):
    products = client.get("/api/products").get_json()
    assert len(products) == len(CATALOG)

    nt = next(p for p in products if p["id"] == "nt-22-1")
    assert (nt["pricePerDay"], nt["priceNextDay"], nt["priceWeekend"]) == (45, 45, 150)
    assert nt["weekendPickupFee"] == 30

    ozon = client.get("/api/products?category=ozonatory").get_json()
    assert [p["id"] for p in ozon] == ["ozonmed-pro-10g"]


def test_seed_is_idempotent(app):
    seed_products()
    assert Product.query.count() == len(CATALOG)


def test_email_without_smtp_is_reported_not_raised(app):
    ok, error = send_email("someone@example.com", "Hello", "Body")
    assert ok is False
    assert error == "Email not configured"


def test_create_admin_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "Boss@WB-Rent.pl", "--password", "long-enough-pass", "--name", "Boss"])
    assert result.exit_code == 0, result.output

    admin = AdminUser.query.filter_by(email="boss@wb-rent.pl").one()
    assert admin.full_name == "Boss"
    assert verify_password("long-enough-pass", admin.password_hash)

    result = runner.invoke(args=["create-admin", "boss@wb-rent.pl", "--password", "short"])
    assert result.exit_code != 0


def test_create_admin_resets_password(app):
    runner = app.test_cli_runner()
    runner.invoke(args=["create-admin", "boss@wb-rent.pl", "--password", "first-password-1"])
    result = runner.invoke(args=["create-admin", "boss@wb-rent.pl", "--password", "second-password-2"])
    assert "password reset" in result.output

    from models import db
    db.session.expire_all()
    admin = AdminUser.query.filter_by(email="boss@wb-rent.pl").one()
    assert verify_password("second-password-2", admin.password_hash)
