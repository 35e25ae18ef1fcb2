"""
Razorpay order creation and checkout signature checks.
The client is synchronous; callers run it off the event loop.
"""

import hashlib
import hmac
import time

import razorpay

from studysphere import config

razorpay_client = razorpay.Client(auth=(config.RAZORPAY_KEY_ID, config.RAZORPAY_KEY_SECRET))


def to_minor_units(amount: float) -> int:
    """Rupees to paise (or the currency's equivalent)"""
    return int(round(amount * 100))


def create_order(amount: float, email: str) -> dict:
    order_data = {
        "amount": to_minor_units(amount),
        "currency": config.PAYMENT_CURRENCY,
        "receipt": f"{email}_{int(time.time())}"[:40],
        "notes": {"email": email},
    }
    return razorpay_client.order.create(data=order_data)


def sign_payment(order_id: str, payment_id: str) -> str:
    message = f"{order_id}|{payment_id}"
    return hmac.new(
        config.RAZORPAY_KEY_SECRET.encode(),
        message.encode(),
        hashlib.sha256
    ).hexdigest()


def verify_signature(order_id: str, payment_id: str, signature: str) -> bool:
    """Checkout signature is HMAC-SHA256 of "order_id|payment_id" under the key secret"""
    return hmac.compare_digest(sign_payment(order_id, payment_id), signature)
