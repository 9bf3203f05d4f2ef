from rest_framework.routers import DefaultRouter

from .views import AuditLogViewSet

router = DefaultRouter()
router.register(r"audits/logs", AuditLogViewSet, basename="audit-logs")

urlpatterns = router.urls
