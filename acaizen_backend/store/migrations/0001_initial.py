"""
PATH: store/migrations/0001_initial.py

MIGRATION: CREATE StoreConfig (singleton id=1, storefront defaults)
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StoreConfig",
            fields=[
                (
                    "id",
                    models.PositiveSmallIntegerField(
                        default=1, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("store_name", models.CharField(default="Açaízen SmartHUB", max_length=255)),
                (
                    "address",
                    models.CharField(
                        blank=True,
                        default="Rua Arthur Oscar, 220 - Vila Nova, Mansa - RJ",
                        max_length=255,
                    ),
                ),
                ("phone", models.CharField(blank=True, default="(24) 9933-9007", max_length=50)),
                ("instagram", models.CharField(blank=True, default="@acaizenn", max_length=100)),
                ("facebook", models.CharField(blank=True, default="@açaizen", max_length=100)),
                ("printer_host", models.CharField(blank=True, default="localhost", max_length=255)),
                ("printer_port", models.CharField(blank=True, default="3333", max_length=10)),
            ],
            options={
                "verbose_name": "store configuration",
                "verbose_name_plural": "store configuration",
            },
        ),
    ]
