# orders/payment_services.py
"""
Razorpay integration: remote order creation at checkout and verification
of the signed payment callback.
"""

import logging

import razorpay
from razorpay.errors import SignatureVerificationError
from django.conf import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    pass


# ══════════════════════════════════════════════════════════════
# RAZORPAY
# ══════════════════════════════════════════════════════════════

class RazorpayPaymentService:

    _client = None

    @classmethod
    def client(cls):
        if cls._client is None:
            if not settings.RAZORPAY_KEY_ID or not settings.RAZORPAY_KEY_SECRET:
                raise PaymentGatewayError("Razorpay is not configured")
            cls._client = razorpay.Client(auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET))
        return cls._client

    @classmethod
    def create_order(cls, amount, receipt, notes=None):
        """
        amount is in minor units (paise). Returns the gateway order id.
        """
        try:
            rp_order = cls.client().order.create({
                'amount':   amount,
                'currency': settings.PAYMENT_CURRENCY,
                'receipt':  receipt,
                'notes':    notes or {},
            })
        except PaymentGatewayError:
            raise
        except Exception as e:
            logger.error(f"Razorpay order creation failed for {receipt}: {e}")
            raise PaymentGatewayError(str(e)) from e
        return rp_order['id']

    @classmethod
    def verify_signature(cls, razorpay_order_id, razorpay_payment_id, razorpay_signature):
        try:
            cls.client().utility.verify_payment_signature({
                'razorpay_order_id':   razorpay_order_id,
                'razorpay_payment_id': razorpay_payment_id,
                'razorpay_signature':  str(razorpay_signature or ''),
            })
        except SignatureVerificationError:
            return False
        return True
