# catalog/models.py
from decimal import Decimal

from django.db import models


class ProductCategory(models.Model):
    name        = models.CharField(max_length=200)
    description = models.TextField()
    thumbnail   = models.URLField(max_length=500, null=True, blank=True)
    order       = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'catalog_product_categories'
        verbose_name_plural = 'Product categories'
        ordering = ['order', '-created_at']

    def __str__(self):
        return self.name


class Product(models.Model):
    """
    A sellable item. Prices live in quantity_details (see catalog.packages);
    order lines point into it by (quantity index, package index).
    """
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    name          = models.CharField(max_length=300)
    description   = models.TextField(null=True, blank=True)
    images        = models.JSONField(default=list, blank=True)
    product_video = models.URLField(max_length=500, null=True, blank=True)
    categories    = models.ManyToManyField(ProductCategory, related_name='products', blank=True)

    quantity_details = models.JSONField(default=list, blank=True)
    metadata         = models.JSONField(default=list, blank=True)

    order        = models.IntegerField(default=100)
    is_published = models.BooleanField(default=False)
    is_popular   = models.BooleanField(default=False)
    is_featured  = models.BooleanField(default=False)
    status       = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)

    count_favorite = models.PositiveIntegerField(default=0)
    is_deleted     = models.BooleanField(default=False)

    # Recomputed from active reviews, see reviews.signals
    rating_avg   = models.DecimalField(max_digits=2, decimal_places=1, default=Decimal('0.0'))
    rating_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'catalog_products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'is_deleted']),
        ]

    def __str__(self):
        return self.name

    @property
    def is_available(self):
        return self.status == 'active' and not self.is_deleted
