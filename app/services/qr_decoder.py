import io

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from app.core.config import Limit, get_global_limit
from app.core.errors import QrDecodeError


def pil_to_cv2(image: Image.Image) -> np.ndarray:
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    arr = np.array(image)
    if image.mode == "L":
        return cv2.cvtColor(arr, cv2.COLOR_GRAY2BGR)
    return cv2.cvtColor(arr, cv2.COLOR_RGB2BGR)


def decode_qr_image(image_bytes: bytes) -> str:
    """
    Decode the first QR code found in an uploaded image.

    - Oversized or unreadable images raise QrDecodeError
    - Images without a QR code raise QrDecodeError
    """
    if not image_bytes:
        raise QrDecodeError("Uploaded image is empty", field="file")

    if len(image_bytes) > get_global_limit(Limit.MAX_QR_IMAGE_BYTES):
        raise QrDecodeError("Please upload an image smaller than 4MB.", field="file")

    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except (UnidentifiedImageError, OSError):
        raise QrDecodeError("Invalid QR code image format.", field="file")

    detector = cv2.QRCodeDetector()
    try:
        text, _points, _ = detector.detectAndDecode(pil_to_cv2(image))
    except cv2.error:
        raise QrDecodeError("QR decoding failed", field="file")

    if not text or not text.strip():
        raise QrDecodeError("No QR code found in image", field="file")

    return text.strip()
