from datetime import timedelta

from pawtrack.models_billing import Invoice
from pawtrack.shared.validators import utcnow


def make_invoice(client, headers, client_id, **extra):
    payload = {
        "clientId": client_id,
        "items": [
            {"description": "Clase individual", "quantity": 2, "unitPrice": "50.00"},
            {"description": "Collar", "quantity": 1, "unitPrice": "12.50"},
        ],
        **extra,
    }
    r = client.post("/invoices", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_invoice_amount_is_sum_of_items(client, admin_headers, customer):
    invoice = make_invoice(client, admin_headers, customer["id"])
    assert invoice["amount"] == "112.50"
    assert [i["totalPrice"] for i in invoice["items"]] == ["100.00", "12.50"]
    assert invoice["status"] == "draft"
    assert invoice["balance"] == "112.50"
    assert invoice["client"]["name"] == "Carla Cliente"


def test_invoice_numbers_follow_daily_sequence(client, admin_headers, customer, other_admin_headers):
    first = make_invoice(client, admin_headers, customer["id"])
    second = make_invoice(client, admin_headers, customer["id"])
    prefix = f"INV-{utcnow():%Y%m%d}-"
    assert first["invoiceNumber"] == f"{prefix}0001"
    assert second["invoiceNumber"] == f"{prefix}0002"

    # Sequences are per business
    rival_client = client.post(
        "/clients", json={"firstName": "R", "lastName": "C", "email": "r@mail.test"}, headers=other_admin_headers
    ).json()
    rival = make_invoice(client, other_admin_headers, rival_client["id"])
    assert rival["invoiceNumber"] == f"{prefix}0001"


def test_invoice_without_items_needs_amount(client, admin_headers, customer):
    r = client.post("/invoices", json={"clientId": customer["id"]}, headers=admin_headers)
    assert r.status_code == 400
    r = client.post("/invoices", json={"clientId": customer["id"], "amount": "75"}, headers=admin_headers)
    assert r.status_code == 201
    assert r.json()["amount"] == "75.00"


def test_invoice_item_validation(client, admin_headers, customer):
    r = client.post(
        "/invoices",
        json={"clientId": customer["id"], "items": [{"description": "x", "quantity": 0, "unitPrice": "1"}]},
        headers=admin_headers,
    )
    assert r.status_code == 422
    r = client.post(
        "/invoices",
        json={"clientId": customer["id"], "items": [{"description": "x", "unitPrice": "-1"}]},
        headers=admin_headers,
    )
    assert r.status_code == 422


def test_sent_invoice_past_due_becomes_overdue(client, admin_headers, customer, db):
    invoice = make_invoice(client, admin_headers, customer["id"], status="sent")
    row = db.get(Invoice, invoice["id"])
    row.due_date = utcnow() - timedelta(days=1)
    db.commit()

    r = client.get(f"/invoices/{invoice['id']}", headers=admin_headers)
    assert r.json()["status"] == "overdue"
    overdue = client.get("/invoices", params={"status": "overdue"}, headers=admin_headers).json()
    assert [i["id"] for i in overdue] == [invoice["id"]]


def test_mark_paid_stamps_paid_date(client, admin_headers, customer):
    invoice = make_invoice(client, admin_headers, customer["id"])
    r = client.patch(f"/invoices/{invoice['id']}", json={"status": "paid"}, headers=admin_headers)
    assert r.json()["status"] == "paid"
    assert r.json()["paidDate"] is not None


def test_delete_only_draft_or_cancelled(client, admin_headers, customer):
    invoice = make_invoice(client, admin_headers, customer["id"], status="sent")
    assert client.delete(f"/invoices/{invoice['id']}", headers=admin_headers).status_code == 400
    client.patch(f"/invoices/{invoice['id']}", json={"status": "cancelled"}, headers=admin_headers)
    assert client.delete(f"/invoices/{invoice['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/invoices/{invoice['id']}", headers=admin_headers).status_code == 404


def test_payments_settle_invoice(client, admin_headers, customer):
    invoice = make_invoice(client, admin_headers, customer["id"], status="sent")
    pay = {"clientId": customer["id"], "invoiceId": invoice["id"], "paymentMethod": "cash"}

    r = client.post("/payments", json={**pay, "amount": "100.00"}, headers=admin_headers)
    assert r.status_code == 201
    assert r.json()["invoiceNumber"] == invoice["invoiceNumber"]
    partial = client.get(f"/invoices/{invoice['id']}", headers=admin_headers).json()
    assert partial["status"] == "sent"
    assert partial["balance"] == "12.50"

    client.post("/payments", json={**pay, "amount": "12.50", "paymentMethod": "card"}, headers=admin_headers)
    settled = client.get(f"/invoices/{invoice['id']}", headers=admin_headers).json()
    assert settled["status"] == "paid"
    assert settled["paidDate"] is not None
    assert settled["amountPaid"] == "112.50"

    payments = client.get("/payments", params={"clientId": customer["id"]}, headers=admin_headers).json()
    assert len(payments) == 2


def test_payment_rules(client, admin_headers, customer):
    invoice = make_invoice(client, admin_headers, customer["id"])
    other = client.post(
        "/clients", json={"firstName": "O", "lastName": "C", "email": "o@mail.test"}, headers=admin_headers
    ).json()

    wrong_client = {"clientId": other["id"], "invoiceId": invoice["id"], "amount": "10", "paymentMethod": "cash"}
    assert client.post("/payments", json=wrong_client, headers=admin_headers).status_code == 400

    bad_method = {"clientId": customer["id"], "amount": "10", "paymentMethod": "bitcoin"}
    assert client.post("/payments", json=bad_method, headers=admin_headers).status_code == 422

    zero = {"clientId": customer["id"], "amount": "0", "paymentMethod": "cash"}
    assert client.post("/payments", json=zero, headers=admin_headers).status_code == 422

    client.patch(f"/invoices/{invoice['id']}", json={"status": "cancelled"}, headers=admin_headers)
    cancelled = {"clientId": customer["id"], "invoiceId": invoice["id"], "amount": "10", "paymentMethod": "cash"}
    assert client.post("/payments", json=cancelled, headers=admin_headers).status_code == 400


def test_invoice_with_payment_cannot_be_deleted(client, admin_headers, customer):
    invoice = make_invoice(client, admin_headers, customer["id"])
    client.post(
        "/payments",
        json={"clientId": customer["id"], "invoiceId": invoice["id"], "amount": "5", "paymentMethod": "transfer"},
        headers=admin_headers,
    )
    assert client.delete(f"/invoices/{invoice['id']}", headers=admin_headers).status_code == 400


def test_expenses_crud_and_range(client, admin_headers):
    def add(category, amount, date):
        r = client.post(
            "/expenses",
            json={"category": category, "description": f"{category} bill", "amount": amount, "expenseDate": date},
            headers=admin_headers,
        )
        assert r.status_code == 201, r.text
        return r.json()

    rent = add("rent", "800", "2026-03-01T00:00:00")
    add("supplies", "45.90", "2026-03-15T00:00:00")
    add("utilities", "60", "2026-04-02T00:00:00")

    listed = client.get("/expenses", headers=admin_headers).json()
    assert [e["category"] for e in listed] == ["utilities", "supplies", "rent"]

    march = client.get(
        "/expenses",
        params={"start": "2026-03-01T00:00:00", "end": "2026-03-31T23:59:59"},
        headers=admin_headers,
    ).json()
    assert len(march) == 2

    r = client.patch(f"/expenses/{rent['id']}", json={"amount": "850"}, headers=admin_headers)
    assert r.json()["amount"] == "850.00"
    assert client.delete(f"/expenses/{rent['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/expenses/{rent['id']}", headers=admin_headers).status_code == 404

    bad = {"category": "toys", "description": "x", "amount": "1", "expenseDate": "2026-03-01T00:00:00"}
    assert client.post("/expenses", json=bad, headers=admin_headers).status_code == 422


def test_billing_is_admin_only(client, teacher_headers):
    assert client.get("/invoices", headers=teacher_headers).status_code == 403
    assert client.get("/expenses", headers=teacher_headers).status_code == 403


def test_item_totals_are_rounded_to_cents(client, admin_headers, customer):
    r = client.post(
        "/invoices",
        json={
            "clientId": customer["id"],
            "items": [{"description": f"Snack {n}", "quantity": 1, "unitPrice": "0.333"} for n in range(3)],
        },
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    invoice = r.json()
    assert [i["totalPrice"] for i in invoice["items"]] == ["0.33", "0.33", "0.33"]
    assert invoice["amount"] == "0.99"

    r = client.post(
        "/invoices",
        json={"clientId": customer["id"], "items": [{"description": "Treats", "quantity": 3, "unitPrice": "0.125"}]},
        headers=admin_headers,
    )
    assert r.json()["items"][0]["totalPrice"] == r.json()["amount"] == "0.38"


def test_receipt_keys_must_belong_to_the_business(client, admin_headers, other_admin_headers):
    upload = client.post(
        "/uploads/receipts",
        files={"file": ("ticket.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 32, "image/png")},
        headers=admin_headers,
    )
    assert upload.status_code == 201, upload.text
    key = upload.json()["key"]
    assert key.startswith("1/receipts/")

    expense = {"category": "supplies", "description": "Leashes", "amount": "20", "expenseDate": "2026-03-01T00:00:00"}
    r = client.post("/expenses", json={**expense, "receiptKey": key}, headers=other_admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "File does not belong to this business"

    rival = client.post("/expenses", json=expense, headers=other_admin_headers).json()
    r = client.patch(f"/expenses/{rival['id']}", json={"receiptKey": key}, headers=other_admin_headers)
    assert r.status_code == 400
    assert client.delete(f"/expenses/{rival['id']}", headers=other_admin_headers).status_code == 200
    assert client.get(upload.json()["url"]).status_code == 200

    own = client.post("/expenses", json={**expense, "receiptKey": key}, headers=admin_headers)
    assert own.status_code == 201
    assert own.json()["receiptKey"] == key
