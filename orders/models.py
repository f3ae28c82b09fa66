# orders/models.py
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator

from catalog.models import Product
from users.models import Address


class Order(models.Model):
    """Main order model"""
    ORDER_STATUS = [
        ('pending', 'Pending'),
        ('confirmed', 'Confirmed'),
        ('processing', 'Processing'),
        ('shipped', 'Shipped'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    PAYMENT_STATUS = [
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('failed', 'Failed'),
        ('refunded', 'Refunded'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='orders')

    # Pricing
    subtotal        = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    coupon_code     = models.CharField(max_length=50, null=True, blank=True)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    total_amount    = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])

    delivery_address = models.ForeignKey(Address, on_delete=models.SET_NULL, null=True, related_name='orders')

    # Status
    status         = models.CharField(max_length=20, choices=ORDER_STATUS, default='pending', db_index=True)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS, default='pending', db_index=True)

    # Payment
    razorpay_order_id   = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    razorpay_payment_id = models.CharField(max_length=100, null=True, blank=True)
    razorpay_signature  = models.CharField(max_length=255, null=True, blank=True)
    payment_method      = models.CharField(max_length=50, default='razorpay')
    payment_date        = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', '-created_at']),
        ]

    def __str__(self):
        return f"Order #{self.id}"


class OrderItem(models.Model):
    """
    One purchased line. Lines are never edited after checkout; the package
    bought is copied into package_snapshot so later catalog edits don't
    change what the order shows.
    """
    order   = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, related_name='order_items')

    product_name   = models.CharField(max_length=255)
    quantity_index = models.PositiveIntegerField()
    package_index  = models.PositiveIntegerField()
    quantity       = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    price       = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    total_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])

    # {'quantityLabel', 'name', 'basePrice', 'sellPrice', 'discountType', 'discountAmount'}
    package_snapshot = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = 'order_items'
        ordering = ['id']

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"
