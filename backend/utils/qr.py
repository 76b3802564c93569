"""QR codes de retrait: image PNG encodée en data URL, affichable telle quelle par le front."""
import base64
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_M

PICKUP_QR_PREFIX = "PERDAMI-PICKUP:"


def pickup_qr_payload(token: str) -> str:
    return f"{PICKUP_QR_PREFIX}{token}"


def token_from_qr_payload(payload: str) -> str:
    """Accepte le contenu scanné (préfixé) ou le jeton brut saisi à la main."""
    payload = (payload or "").strip()
    if payload.startswith(PICKUP_QR_PREFIX):
        return payload[len(PICKUP_QR_PREFIX):]
    return payload


def qr_data_url(data: str, box_size: int = 8, border: int = 2) -> str:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)
    buffer = BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def pickup_qr_code(token: str) -> str:
    return qr_data_url(pickup_qr_payload(token))
