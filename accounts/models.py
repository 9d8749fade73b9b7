from django.contrib.auth.models import AbstractUser
from django.db import models


class Organization(models.Model):
    name = models.CharField(max_length=200, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    organization = models.ForeignKey(Organization, on_delete=models.SET_NULL, null=True, blank=True,
                                     related_name='categories', help_text="Owning organization, empty for global categories")

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name


class User(AbstractUser):
    email = models.EmailField(unique=True)
    skills = models.JSONField(default=list, blank=True, help_text="Free-text skills the user can offer")
    city = models.CharField(max_length=100, blank=True, default='')
    organization = models.ForeignKey(Organization, on_delete=models.SET_NULL, null=True, blank=True, related_name='members')
    categories = models.ManyToManyField(Category, blank=True, related_name='users')
    completed_swaps_count = models.PositiveIntegerField(default=0)
    positive_reviews_count = models.PositiveIntegerField(default=0)

    def __str__(self):
        return self.username
