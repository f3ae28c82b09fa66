# reviews/signals.py
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Count, Sum
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from catalog.models import Product

from .models import Review

logger = logging.getLogger(__name__)


def update_product_rating(product_id):
    """Recompute ratingAvg / ratingCount from the product's active reviews."""
    with transaction.atomic():
        product = Product.objects.select_for_update().filter(pk=product_id).first()
        if product is None:
            return
        stats = Review.objects.filter(product_id=product_id, status='active').aggregate(
            total=Sum('rating'),
            count=Count('id'),
        )
        count = stats['count'] or 0
        if count:
            average = (Decimal(stats['total']) / count).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
        else:
            average = Decimal('0')
        Product.objects.filter(pk=product_id).update(rating_avg=average, rating_count=count)

    logger.info(f"Updated product {product_id} rating: {average} ({count} reviews)")


@receiver(post_save, sender=Review)
def review_saved(sender, instance, **kwargs):
    update_product_rating(instance.product_id)


@receiver(post_delete, sender=Review)
def review_deleted(sender, instance, **kwargs):
    update_product_rating(instance.product_id)
