# promotions/models.py
from django.db import models
from django.core.validators import MinValueValidator


class Coupon(models.Model):
    """Discount coupons"""
    DISCOUNT_TYPES = [
        ('percent', 'Percent'),
        ('flat', 'Flat'),
    ]

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    code = models.CharField(max_length=50, unique=True, db_index=True)

    discount_type  = models.CharField(max_length=10, choices=DISCOUNT_TYPES)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    # Conditions
    max_discount    = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    min_order_value = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    # Only ever incremented, once per created order
    usage_count = models.PositiveIntegerField(default=0)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'coupons'
        ordering = ['-created_at']

    def __str__(self):
        return self.code

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)
