# cart/models.py
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator

from catalog.models import Product


class Cart(models.Model):
    """Shopping cart, one per user"""
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='cart')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'cart_carts'

    def __str__(self):
        return f"Cart of {self.user}"


class CartItem(models.Model):
    """A quantity of one package of one product"""
    cart    = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='cart_items')

    # Positions inside product.quantity_details
    quantity_index = models.PositiveIntegerField()
    package_index  = models.PositiveIntegerField()

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'cart_items'
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['cart', 'product', 'quantity_index', 'package_index'],
                name='unique_cart_line',
            ),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.product_id} [{self.quantity_index}/{self.package_index}]"
