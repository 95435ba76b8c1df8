from django.conf import settings
from django.db import models


class Visitor(models.Model):
    """Profile of a user registered through the visitor chain; the username is an e-mail address"""
    SEX_MALE = 'MALE'
    SEX_FEMALE = 'FEMALE'
    SEX_CHOICES = [
        (SEX_MALE, 'Male'),
        (SEX_FEMALE, 'Female'),
    ]

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='visitor')
    sex = models.CharField(max_length=10, choices=SEX_CHOICES)
    date_birthday = models.DateField()
    mobile_number = models.CharField(max_length=20, blank=True)

    def __str__(self):
        return self.user.username

    class Meta:
        db_table = 'visitors'
