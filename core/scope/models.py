from django.db import models


class Entity(models.Model):
    """
    A legal entity / tenant. Its primary key is the scope id carried by
    every scoped record.
    """
    code = models.CharField(max_length=30, unique=True)
    name = models.CharField(max_length=150)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'scope_entity'
        verbose_name = 'Entity'
        verbose_name_plural = 'Entities'
        ordering = ['code']

    def __str__(self):
        return f"{self.code} - {self.name}"
