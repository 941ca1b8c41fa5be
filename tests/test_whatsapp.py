from urllib.parse import parse_qs, urlparse

from cupify.notify.whatsapp import build_order_message, digits_only, order_whatsapp_link

ORDER = {
    "orderCode": "CUP-7KQ2ZD",
    "language": "en",
    "packSize": 2,
    "items": [{"colorCode": "RED", "qty": 1}, {"colorCode": "BLUE", "qty": 1}],
    "customer": {"name": "Sara Ali", "mobile": "0501234567", "city": "Dubai", "address": "Marina", "preferredTime": "Evening"},
    "totalPrice": 50,
}


def test_digits_only():
    assert digits_only("+971 (50) 000-0000") == "971500000000"
    assert digits_only(None) == ""


def test_english_message():
    body = build_order_message(ORDER, {"RED": "Red", "BLUE": "Blue"}, "en")
    assert "CUP-7KQ2ZD" in body
    assert "• Red x1" in body
    assert "Preferred: Evening" in body
    assert body.endswith("*Total:* 50 AED")


def test_arabic_message_falls_back_to_codes():
    body = build_order_message(ORDER, {}, "ar")
    assert "• RED x1" in body
    assert "مساءً" in body
    assert "50 درهم" in body


def test_link_round_trips_text():
    url = order_whatsapp_link(ORDER, {"RED": "Red"}, "+971 50 000 0000")
    parsed = urlparse(url)
    assert parsed.netloc == "wa.me"
    assert parsed.path == "/971500000000"
    text = parse_qs(parsed.query)["text"][0]
    assert text == build_order_message(ORDER, {"RED": "Red"}, "en")
