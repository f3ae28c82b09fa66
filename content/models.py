# content/models.py
import re
import time

from django.conf import settings
from django.db import models
from django.utils import timezone


STATUS_CHOICES = [
    ('active', 'Active'),
    ('inactive', 'Inactive'),
]


def slugify_title(title, stamp=None):
    """
    "Hello, World!" → "hello-world-1718000000000"

    The millisecond suffix keeps slugs unique across equal titles.
    """
    stamp = stamp if stamp is not None else int(time.time() * 1000)
    base = title.lower()
    base = re.sub(r'[^\w\s-]', '', base)
    base = re.sub(r'\s+', '-', base)
    base = re.sub(r'-+', '-', base)
    base = base.strip('-')
    return f"{base}-{stamp}"


class Author(models.Model):
    name             = models.CharField(max_length=200)
    profile_image    = models.URLField(max_length=500, null=True, blank=True)
    instagram_handle = models.CharField(max_length=100, null=True, blank=True)
    description      = models.TextField(null=True, blank=True)
    status           = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)
    order            = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'content_authors'
        ordering = ['order', '-created_at']

    def __str__(self):
        return self.name


class Category(models.Model):
    """Blog category. used_count tracks how many blogs reference it."""
    name       = models.CharField(max_length=200, unique=True)
    image      = models.URLField(max_length=500, null=True, blank=True)
    status     = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)
    featured   = models.BooleanField(default=False)
    popular    = models.BooleanField(default=False)
    has_new    = models.BooleanField(default=False)
    used_count = models.PositiveIntegerField(default=0)
    order      = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'content_categories'
        verbose_name_plural = 'Categories'
        ordering = ['order', '-created_at']

    def __str__(self):
        return self.name


class Topic(models.Model):
    name       = models.CharField(max_length=200)
    categories = models.ManyToManyField(Category, related_name='topics', blank=True)
    status     = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)
    featured   = models.BooleanField(default=False)
    popular    = models.BooleanField(default=False)
    order      = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'content_topics'
        ordering = ['order', '-created_at']

    def __str__(self):
        return self.name


class Blog(models.Model):
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('published', 'Published'),
        ('archived', 'Archived'),
    ]

    title       = models.CharField(max_length=300)
    description = models.TextField()
    content     = models.TextField()
    thumbnail   = models.URLField(max_length=500, null=True, blank=True)
    video_link  = models.URLField(max_length=500, null=True, blank=True)

    author     = models.ForeignKey(Author, on_delete=models.PROTECT, related_name='blogs')
    categories = models.ManyToManyField(Category, related_name='blogs', blank=True)
    topics     = models.ManyToManyField(Topic, related_name='blogs', blank=True)

    status    = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft', db_index=True)
    featured  = models.BooleanField(default=False)
    popular   = models.BooleanField(default=False)
    favorites = models.PositiveIntegerField(default=0)
    views     = models.PositiveIntegerField(default=0)
    order     = models.IntegerField(default=0)

    published_at = models.DateTimeField(null=True, blank=True)
    slug         = models.SlugField(max_length=400, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'content_blogs'
        ordering = ['order', '-created_at']
        indexes = [
            models.Index(fields=['status', '-published_at']),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if self._state.adding or not self.slug:
            self.slug = slugify_title(self.title)
        elif Blog.objects.filter(pk=self.pk).exclude(title=self.title).exists():
            self.slug = slugify_title(self.title)
            if 'update_fields' in kwargs and kwargs['update_fields'] is not None:
                kwargs['update_fields'] = set(kwargs['update_fields']) | {'slug'}

        if self.status == 'published' and not self.published_at:
            self.published_at = timezone.now()
            if 'update_fields' in kwargs and kwargs['update_fields'] is not None:
                kwargs['update_fields'] = set(kwargs['update_fields']) | {'published_at'}

        super().save(*args, **kwargs)


class Favorite(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='favorite_blogs')
    blog = models.ForeignKey(Blog, on_delete=models.CASCADE, related_name='favorited_by')

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'content_favorites'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'blog'], name='unique_user_favorite_blog'),
        ]


class Contact(models.Model):
    fullname    = models.CharField(max_length=200)
    email       = models.EmailField()
    phonenumber = models.CharField(max_length=20)
    message     = models.TextField()
    is_deleted  = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'content_contacts'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.fullname} <{self.email}>"

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        super().save(*args, **kwargs)
