from django.apps import AppConfig


class PosConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pos"
    verbose_name = "PDV"

    def ready(self):
        from pos.cart import CartRegistry

        # operator-scoped carts live here for the lifetime of the process
        self.carts = CartRegistry()
