# users/models.py
from django.db import models, transaction
from django.contrib.auth.models import AbstractUser, UserManager


class FirebaseUserManager(UserManager):

    def create_from_claims(self, claims, role='user', **profile):
        """Mirror a Firebase subject locally. Username is the Firebase uid."""
        provider = (claims.get('firebase') or {}).get('sign_in_provider', '')
        user = self.model(
            username=claims['uid'],
            firebase_uid=claims['uid'],
            email=claims.get('email') or '',
            phone_number=claims.get('phone_number') or '',
            is_email_verified=bool(claims.get('email_verified', False)),
            firebase_sign_in_provider=provider or '',
            role=role,
            **profile,
        )
        user.set_unusable_password()
        user.save()
        return user


class User(AbstractUser):
    """Local mirror of an identity-provider account."""
    ROLES = [
        ('user', 'User'),
        ('admin', 'Admin'),
    ]

    firebase_uid              = models.CharField(max_length=128, unique=True)
    phone_number              = models.CharField(max_length=20, blank=True)
    firebase_sign_in_provider = models.CharField(max_length=50, blank=True)
    is_email_verified         = models.BooleanField(default=False)

    role       = models.CharField(max_length=10, choices=ROLES, default='user', db_index=True)
    is_blocked = models.BooleanField(default=False)
    is_deleted = models.BooleanField(default=False)

    full_name     = models.CharField(max_length=200, blank=True, null=True)
    gender        = models.CharField(max_length=20, blank=True, null=True)
    date_of_birth = models.DateField(null=True, blank=True)
    profile_image = models.URLField(max_length=500, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = FirebaseUserManager()

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['email']),
            models.Index(fields=['phone_number']),
        ]

    def __str__(self):
        return self.full_name or self.email or self.firebase_uid


class Address(models.Model):
    """Customer saved addresses"""
    LABELS = [
        ('Home', 'Home'),
        ('Work', 'Work'),
        ('Other', 'Other'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='addresses')

    address = models.CharField(max_length=500)
    zipcode = models.CharField(max_length=20)
    city    = models.CharField(max_length=100)
    state   = models.CharField(max_length=100)
    label   = models.CharField(max_length=10, choices=LABELS, default='Other')

    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'addresses'
        verbose_name_plural = 'Addresses'
        ordering = ['-is_default', '-created_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'address'], name='unique_user_address'),
        ]
        indexes = [
            models.Index(fields=['user']),
        ]

    def __str__(self):
        return f"{self.label}: {self.address}, {self.city}"

    def save(self, *args, **kwargs):
        # A user has at most one default address.
        with transaction.atomic():
            super().save(*args, **kwargs)
            if self.is_default:
                Address.objects.filter(user_id=self.user_id, is_default=True).exclude(pk=self.pk).update(is_default=False)
