from django.contrib import admin
from django.urls import path

urlpatterns = [
    # Finance back office lives in the Django admin
    path("admin/", admin.site.urls),
]
