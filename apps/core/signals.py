# apps/core/signals.py

from django.db.models.signals import post_save
from django.dispatch import receiver
from .models import Board


@receiver(post_save, sender=Board)
def create_default_columns(sender, instance, created, **kwargs):
    """
    Cria colunas padrão quando um novo board é criado
    APENAS se ainda não há colunas (fixtures/seed podem criar as suas)
    """
    if created and not kwargs.get('raw') and not instance.columns.exists():
        instance.create_default_columns()
