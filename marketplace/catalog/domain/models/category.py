from django.db import models


class Category(models.Model):
    # Identity key clients pass around as ``categoryId`` (e.g. "c1")
    id = models.CharField(primary_key=True, max_length=64)
    name = models.CharField(max_length=100, unique=True)
    image = models.URLField(max_length=500, blank=True)

    class Meta:
        verbose_name_plural = "Categories"
        ordering = ["name"]
        app_label = "marketplace"

    def __str__(self):
        return self.name
