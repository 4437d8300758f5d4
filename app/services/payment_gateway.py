"""
Razorpay API Client
Creates orders and verifies checkout signatures through the Razorpay SDK
"""
from typing import Any, Dict, Optional

import razorpay
from fastapi import HTTPException, status
from razorpay.errors import SignatureVerificationError

from app.core.config import settings


class RazorpayClient:
    """Thin wrapper over ``razorpay.Client`` exposing the two calls the service needs"""

    def __init__(self, key_id: Optional[str] = None, key_secret: Optional[str] = None):
        self.key_id = key_id or settings.RAZORPAY_KEY_ID
        self.key_secret = key_secret or settings.RAZORPAY_KEY_SECRET

        if not self.key_id or not self.key_secret:
            raise ValueError("Razorpay key id and secret are required")

        self.client = razorpay.Client(auth=(self.key_id, self.key_secret))

    def create_order(self, amount: int, currency: str, receipt: str, notes: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """Create an order; amount is in the currency's smallest unit"""
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,
        }
        if notes:
            payload["notes"] = notes
        return self.client.order.create(data=payload, timeout=settings.PAYMENT_TIMEOUT_SECONDS)

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Check the checkout signature returned to the browser"""
        try:
            self.client.utility.verify_payment_signature({
                "razorpay_order_id": order_id,
                "razorpay_payment_id": payment_id,
                "razorpay_signature": signature,
            })
        except SignatureVerificationError:
            return False
        return True


def get_payment_gateway() -> RazorpayClient:
    """FastAPI dependency returning the configured gateway client"""
    try:
        return RazorpayClient()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
