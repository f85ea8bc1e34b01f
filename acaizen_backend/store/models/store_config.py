# store/models/store_config.py

from django.db import models

SINGLETON_ID = 1

DEFAULT_STORE_NAME = "Açaízen SmartHUB"
DEFAULT_ADDRESS = "Rua Arthur Oscar, 220 - Vila Nova, Mansa - RJ"
DEFAULT_PHONE = "(24) 9933-9007"
DEFAULT_INSTAGRAM = "@acaizenn"
DEFAULT_FACEBOOK = "@açaizen"
DEFAULT_PRINTER_HOST = "localhost"
DEFAULT_PRINTER_PORT = "3333"


class StoreConfig(models.Model):
    """
    Store identity + printer helper location (SINGLETON, id=1).

    Guarantees:
    - load() always returns the one row, creating it with defaults on first read
    - receipts read name/address/phone/socials from here at print time
    """

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_ID, editable=False)

    store_name = models.CharField(max_length=255, default=DEFAULT_STORE_NAME)
    address = models.CharField(max_length=255, blank=True, default=DEFAULT_ADDRESS)
    phone = models.CharField(max_length=50, blank=True, default=DEFAULT_PHONE)
    instagram = models.CharField(max_length=100, blank=True, default=DEFAULT_INSTAGRAM)
    facebook = models.CharField(max_length=100, blank=True, default=DEFAULT_FACEBOOK)

    printer_host = models.CharField(max_length=255, blank=True, default=DEFAULT_PRINTER_HOST)
    printer_port = models.CharField(max_length=10, blank=True, default=DEFAULT_PRINTER_PORT)

    class Meta:
        verbose_name = "store configuration"
        verbose_name_plural = "store configuration"

    @classmethod
    def load(cls) -> "StoreConfig":
        config, _ = cls.objects.get_or_create(pk=SINGLETON_ID)
        return config

    def save(self, *args, **kwargs):
        self.pk = SINGLETON_ID
        super().save(*args, **kwargs)

    @property
    def printer_base_url(self) -> str:
        host = (self.printer_host or DEFAULT_PRINTER_HOST).strip()
        port = (str(self.printer_port or "") or DEFAULT_PRINTER_PORT).strip()
        return f"http://{host}:{port}"

    def __str__(self):
        return self.store_name
