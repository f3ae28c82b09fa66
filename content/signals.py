# content/signals.py
"""
Category.used_count bookkeeping.

Every blog↔category link adds one to the category, every unlink removes one
(never below zero). Deleting a blog unlinks all of its categories.
"""

import logging

from django.db.models import F
from django.db.models.signals import m2m_changed, pre_delete
from django.dispatch import receiver

from .models import Blog, Category

logger = logging.getLogger(__name__)


def increment_used_count(category_ids):
    if not category_ids:
        return
    Category.objects.filter(pk__in=category_ids).update(used_count=F('used_count') + 1)
    logger.debug(f"used_count +1 for categories {sorted(category_ids)}")


def decrement_used_count(category_ids):
    if not category_ids:
        return
    Category.objects.filter(pk__in=category_ids, used_count__gt=0).update(used_count=F('used_count') - 1)
    logger.debug(f"used_count -1 for categories {sorted(category_ids)}")


@receiver(m2m_changed, sender=Blog.categories.through)
def blog_categories_changed(sender, instance, action, reverse, pk_set, **kwargs):
    if not reverse:
        # instance is a Blog, pk_set holds Category ids
        if action == 'post_add':
            increment_used_count(pk_set)
        elif action == 'post_remove':
            decrement_used_count(pk_set)
        elif action == 'pre_clear':
            decrement_used_count(set(instance.categories.values_list('pk', flat=True)))
        return

    # instance is a Category, pk_set holds Blog ids
    if action == 'post_add' and pk_set:
        Category.objects.filter(pk=instance.pk).update(used_count=F('used_count') + len(pk_set))
    elif action == 'post_remove' and pk_set:
        _decrement_by(instance.pk, len(pk_set))
    elif action == 'pre_clear':
        _decrement_by(instance.pk, instance.blogs.count())


def _decrement_by(category_id, amount):
    category = Category.objects.filter(pk=category_id).first()
    if category is None or not amount:
        return
    Category.objects.filter(pk=category_id).update(used_count=max(category.used_count - amount, 0))


@receiver(pre_delete, sender=Blog)
def blog_deleted(sender, instance, **kwargs):
    decrement_used_count(set(instance.categories.values_list('pk', flat=True)))
