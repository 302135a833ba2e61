import uuid
from typing import TYPE_CHECKING, Optional

from django.db import models
from django.utils import timezone

if TYPE_CHECKING:
    from django.db.models.manager import RelatedManager


class TranslatableMixin(models.Model):
    """Entities with a source language and per language translations."""

    language = models.CharField(max_length=12, default="en")

    translations: "RelatedManager"
    translated_fields: tuple = ()

    class Meta:
        abstract = True

    def _translation(self, language: str):
        return self.translations.filter(language=language).first()

    def has_translation(self, language: str) -> bool:
        return language == self.language or self._translation(language) is not None

    def get_translation(self, language: str):
        if language == self.language:
            return self

        translation = self._translation(language)
        if translation is None:
            return self

        translated = self.__class__.objects.get(pk=self.pk)
        translated.language = translation.language
        for field in self.translated_fields:
            setattr(translated, field, getattr(translation, field))
        return translated


class ConfigPage(TranslatableMixin):
    type = models.CharField(max_length=64, unique=True)  # noqa: A003
    site_name = models.CharField(max_length=255)

    translated_fields = ("site_name",)


class ConfigPageTranslation(models.Model):
    page = models.ForeignKey(
        ConfigPage,
        related_name="translations",
        on_delete=models.CASCADE,
    )
    language = models.CharField(max_length=12)
    site_name = models.CharField(max_length=255)


class Node(TranslatableMixin):
    BUNDLE_CHOICES = [
        ("article", "Article"),
        ("page", "Basic page"),
    ]

    uuid = models.UUIDField(default=uuid.uuid4, unique=True)
    title = models.CharField(max_length=255)
    bundle = models.CharField(max_length=32, choices=BUNDLE_CHOICES)
    created = models.DateTimeField(default=timezone.now)
    event_date = models.DateField(null=True, blank=True)

    translated_fields = ("title",)


class NodeTranslation(models.Model):
    node = models.ForeignKey(
        Node,
        related_name="translations",
        on_delete=models.CASCADE,
    )
    language = models.CharField(max_length=12)
    title = models.CharField(max_length=255)


class Menu(models.Model):
    id = models.CharField(max_length=64, primary_key=True)  # noqa: A003
    label = models.CharField(max_length=255)


class MenuLink(models.Model):
    menu = models.ForeignKey(Menu, related_name="links", on_delete=models.CASCADE)
    parent_id: Optional[int]
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        related_name="children",
        on_delete=models.CASCADE,
    )
    title = models.CharField(max_length=255)
    weight = models.IntegerField(default=0)
    enabled = models.BooleanField(default=True)
    permission = models.CharField(max_length=255, blank=True, default="")
