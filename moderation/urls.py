from rest_framework.routers import DefaultRouter

from .views import AdminPostViewSet, AdminReportViewSet, AdminStatsViewSet, AdminUserViewSet, AdminVerificationViewSet

router = DefaultRouter()
router.register("admin/verifications", AdminVerificationViewSet, basename="admin-verifications")
router.register("admin/users", AdminUserViewSet, basename="admin-users")
router.register("admin/reports", AdminReportViewSet, basename="admin-reports")
router.register("admin/posts", AdminPostViewSet, basename="admin-posts")
router.register("admin/stats", AdminStatsViewSet, basename="admin-stats")

urlpatterns = router.urls
