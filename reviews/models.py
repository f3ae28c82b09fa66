# reviews/models.py
from django.db import models
from django.conf import settings
from django.core.validators import MaxLengthValidator, MaxValueValidator, MinLengthValidator, MinValueValidator
from catalog.models import Product


class Review(models.Model):
    """Product reviews, one per user and product"""
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('hidden', 'Hidden'),
        ('reported', 'Reported'),
    ]

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='reviews')
    user    = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews')
    order   = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='reviews')

    rating  = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    message = models.TextField(validators=[MinLengthValidator(10), MaxLengthValidator(1000)])

    is_verified_purchase = models.BooleanField(default=True)

    # Moderation; only active reviews count towards the product rating
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reviews'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['product', 'status']),
            models.Index(fields=['user']),
        ]
        constraints = [
            models.UniqueConstraint(fields=['user', 'product'], name='one_review_per_user_product'),
        ]

    def __str__(self):
        return f"{self.rating}★ {self.product_id} by {self.user_id}"
