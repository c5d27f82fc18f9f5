"""
Razorpay Service - order creation and checkout signature verification
"""
import hashlib
import hmac
import logging
from typing import Dict, Any

import httpx

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when the gateway is unreachable or rejects a request"""


def generate_signature(order_id: str, payment_id: str, secret: str) -> str:
    """HMAC-SHA256 hex digest over '<order_id>|<payment_id>', as Razorpay signs checkouts"""
    body = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode(), body.encode(), hashlib.sha256).hexdigest()


class RazorpayService:
    """
    Razorpay REST client

    Only the Orders API is used; payment capture happens on the client and
    is confirmed back to us with a signature.
    """

    def __init__(self, key_id: str, key_secret: str,
                 base_url: str = "https://api.razorpay.com/v1", timeout: float = 30.0):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url
        self.timeout = timeout

    async def _make_request(self, method: str, endpoint: str, data: Dict = None) -> Dict[str, Any]:
        """Make HTTP request to Razorpay API"""
        if not self.key_id or not self.key_secret:
            raise PaymentGatewayError("Razorpay credentials are not configured")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout
            ) as client:
                response = await client.request(method, endpoint, json=data)
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Razorpay API request failed: {e}")
            logger.error(f"Response: {e.response.text}")
            raise PaymentGatewayError(str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"Razorpay API request failed: {e}")
            raise PaymentGatewayError(str(e)) from e

    async def create_order(self, amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        """Create an order; amount is in the currency's smallest unit (paise for INR)"""
        return await self._make_request("POST", "/orders", {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
        })

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not self.key_secret:
            logger.error("Cannot verify payment signature: RAZORPAY_SECRET is not configured")
            return False
        expected = generate_signature(order_id, payment_id, self.key_secret)
        return hmac.compare_digest(expected.encode(), signature.encode())
