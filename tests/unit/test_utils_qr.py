import base64

from backend.utils.qr import pickup_qr_code, pickup_qr_payload, token_from_qr_payload


def test_payload_round_trip_and_raw_token():
    assert token_from_qr_payload(pickup_qr_payload("abc")) == "abc"
    assert token_from_qr_payload("  abc ") == "abc"


def test_pickup_qr_code_is_png_data_url():
    url = pickup_qr_code("tok-123")
    assert url.startswith("data:image/png;base64,")
    png = base64.b64decode(url.split(",", 1)[1])
    assert png[:8] == b"\x89PNG\r\n\x1a\n"
