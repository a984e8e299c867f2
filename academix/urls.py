"""
URL configuration for the academix project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.1/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from accounts.views import UserViewSet
from experience.views import ExperienceViewSet, PublicExperienceListView
from notifications.views import NotificationViewSet
from organizations.views import OrganizationViewSet
from portfolio.views import MyPortfolioView, PublicPortfolioView
from profiles.views import StudentProfileViewSet
from verification.views import (
    OrganizationVerificationRequestViewSet,
    StudentVerificationRequestViewSet,
)
from academix.views import DashboardView, health_check

# Create router and register viewsets
router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')
router.register(r'profiles', StudentProfileViewSet, basename='profile')
# Before 'organizations' so the queue is not read as an organization id.
router.register(
    r'organizations/verification-requests',
    OrganizationVerificationRequestViewSet,
    basename='organization-verification-request',
)
router.register(
    r'students/verification-requests',
    StudentVerificationRequestViewSet,
    basename='student-verification-request',
)
router.register(r'organizations', OrganizationViewSet, basename='organization')
router.register(r'experiences', ExperienceViewSet, basename='experience')
router.register(r'notifications', NotificationViewSet, basename='notification')

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include(router.urls)),
    path('api/portfolio/me/', MyPortfolioView.as_view(), name='portfolio-me'),
    path('api/public/experiences/', PublicExperienceListView.as_view(), name='public-experiences'),
    path('api/public/portfolios/<slug:slug>/', PublicPortfolioView.as_view(), name='public-portfolio'),
    path('api/dashboard/', DashboardView.as_view(), name='dashboard'),
    path('api/health/', health_check, name='health'),
    path('api-auth/', include('rest_framework.urls')),
]
