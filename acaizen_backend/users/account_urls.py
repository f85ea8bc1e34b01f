# users/account_urls.py

from rest_framework.routers import SimpleRouter

from .views import UserViewSet

app_name = "accounts"

router = SimpleRouter()
router.register("", UserViewSet, basename="user")

urlpatterns = router.urls
