from datetime import date, timedelta

from models.audit_log import AuditLog
from models.product_notification import ProductNotification
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_admin_endpoints_require_login(client):
    assert client.get("/api/admin/reservations").status_code == 401
    assert client.get("/api/admin/stats").status_code == 401
    resp = client.patch("/api/admin/reservations/1", json={"status": "confirmed"},
                        headers={"Authorization": "Bearer forged"})
    assert resp.status_code == 401


def test_login_with_wrong_password(client, admin):
    resp = client.post("/api/admin/auth/login", json={"email": ADMIN_EMAIL, "password": "nope-nope-nope"})
    assert resp.status_code == 401
    assert AuditLog.query.filter_by(action="ADMIN_LOGIN_FAIL").count() == 1


def test_me_and_logout(client, admin_headers):
    resp = client.get("/api/admin/auth/me", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["email"] == ADMIN_EMAIL

    assert client.post("/api/admin/auth/logout", headers=admin_headers).status_code == 200
    assert client.get("/api/admin/auth/me", headers=admin_headers).status_code == 401


def test_new_login_revokes_previous_session(client, admin_headers):
    client.post("/api/admin/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert client.get("/api/admin/auth/me", headers=admin_headers).status_code == 401


def test_list_and_filter_reservations(client, admin_headers, make_reservation):
    make_reservation(status="pending")
    make_reservation(product_id="puzzi-10-1", status="confirmed")

    rows = client.get("/api/admin/reservations", headers=admin_headers).get_json()
    assert len(rows) == 2

    rows = client.get("/api/admin/reservations?status=confirmed", headers=admin_headers).get_json()
    assert [r["product_id"] for r in rows] == ["puzzi-10-1"]

    assert client.get("/api/admin/reservations?status=lost", headers=admin_headers).status_code == 400


def test_reservation_detail_lists_allowed_transitions(client, admin_headers, make_reservation):
    r = make_reservation(status="confirmed")
    body = client.get(f"/api/admin/reservations/{r.id}", headers=admin_headers).get_json()
    assert body["allowed_transitions"] == ["cancelled", "picked_up"]
    assert client.get("/api/admin/reservations/9999", headers=admin_headers).status_code == 404


def test_status_change_sends_one_email(client, admin_headers, make_reservation, emails):
    r = make_reservation(status="pending")
    url = f"/api/admin/reservations/{r.id}"

    resp = client.patch(url, json={"status": "confirmed"}, headers=admin_headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["changed"] is True
    assert body["data"]["status"] == "confirmed"
    assert body["notifications"][0]["kind"] == "status_confirmed"

    resp = client.patch(url, json={"status": "confirmed"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["changed"] is False

    assert len(emails.sent) == 1
    assert AuditLog.query.filter_by(action="RESERVATION_STATUS_CHANGE").count() == 1


def test_illegal_transition_is_refused(client, admin_headers, make_reservation, emails):
    r = make_reservation(status="pending")
    resp = client.patch(f"/api/admin/reservations/{r.id}", json={"status": "returned"}, headers=admin_headers)
    assert resp.status_code == 409
    assert resp.get_json()["allowed"] == ["cancelled", "confirmed", "rejected"]
    assert emails.sent == []


def test_invalid_status_value(client, admin_headers, make_reservation):
    r = make_reservation()
    resp = client.patch(f"/api/admin/reservations/{r.id}", json={"status": "lost"}, headers=admin_headers)
    assert resp.status_code == 400
    resp = client.patch(f"/api/admin/reservations/{r.id}", json={}, headers=admin_headers)
    assert resp.status_code == 400


def test_return_releases_stock_notifications(app, client, admin_headers, make_reservation, emails):
    from models import db

    today = date.today()
    r = make_reservation(start=today - timedelta(days=3), end=today, status="picked_up")
    db.session.add(ProductNotification(product_id="nt-22-1", email="wait@example.com"))
    db.session.commit()

    resp = client.patch(f"/api/admin/reservations/{r.id}", json={"status": "returned"}, headers=admin_headers)
    assert resp.get_json()["released_subscribers"] == 1
    assert "wait@example.com" in [m["to"] for m in emails.sent]


def test_stats_and_revenue(client, admin_headers, make_reservation):
    today = date.today()
    make_reservation(start=today - timedelta(days=2), end=today, status="completed",
                     base_price=90, total_price=90)
    make_reservation(start=today - timedelta(days=40), end=today - timedelta(days=38), status="returned",
                     base_price=60, total_price=60)
    make_reservation(product_id="puzzi-10-1", start=today, end=today + timedelta(days=1), status="confirmed",
                     base_price=60, total_price=60)
    make_reservation(product_id="sg-4-4", status="cancelled", base_price=500, total_price=500)

    stats = client.get("/api/admin/stats", headers=admin_headers).get_json()
    assert stats["reservations"]["total"] == 4
    assert stats["reservations"]["completed"] == 1
    assert stats["reservations"]["cancelled"] == 1
    assert stats["revenue"]["today"] == 90
    assert stats["revenue"]["total"] == 150
    assert stats["revenue"]["pending"] == 60

    revenue = client.get("/api/admin/revenue", headers=admin_headers).get_json()
    assert sum(m["revenue"] for m in revenue["byMonth"]) == 150
    assert [m["month"] for m in revenue["byMonth"]] == sorted(m["month"] for m in revenue["byMonth"])


def test_manual_reminder_trigger(client, admin_headers, make_reservation, emails):
    tomorrow = date.today() + timedelta(days=1)
    make_reservation(start=tomorrow, end=tomorrow + timedelta(days=2), status="confirmed")

    body = client.post("/api/admin/send-reminders", headers=admin_headers).get_json()
    assert body["pickup_reminders"] == 1
    assert body["return_reminders"] == 0


def test_audit_log_listing(client, admin_headers):
    resp = client.get("/api/admin/audit-logs", headers=admin_headers)
    assert resp.status_code == 200
    assert "ADMIN_LOGIN" in [e["action"] for e in resp.get_json()]
