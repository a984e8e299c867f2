"""
Portfolio app views
"""
from rest_framework import generics
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsStudent
from profiles.models import StudentProfile
from verification import errors
from verification.responses import error_response

from .serializers import PortfolioSerializer, PublicPortfolioSerializer
from .services import PortfolioService


class MyPortfolioView(generics.RetrieveUpdateAPIView):
    """
    GET /api/portfolio/me/: The student's portfolio, created on first access
    PATCH /api/portfolio/me/: Update title, headline or is_public
    """

    serializer_class = PortfolioSerializer
    permission_classes = [IsAuthenticated, IsStudent]

    def get_object(self):
        student = StudentProfile.objects.filter(user=self.request.user).first()
        if student is None:
            raise PermissionDenied('Create your student profile first.')
        return PortfolioService.get_or_create_for_student(student)


class PublicPortfolioView(APIView):
    """GET /api/public/portfolios/<slug>/"""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, slug):
        try:
            data = PortfolioService.public_portfolio(slug)
        except errors.NotFound as exc:
            return error_response(exc)
        return Response(PublicPortfolioSerializer(data).data)
