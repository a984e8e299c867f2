"""
Portfolio Service Layer

Builds a student's public portfolio from their verified experiences.
"""
import logging
from typing import Dict

from django.utils.text import slugify

from experience.models import Experience, VerificationStatus
from verification import errors

from .models import Portfolio

logger = logging.getLogger(__name__)


class PortfolioService:
    """Service for student portfolios."""

    SLUG_MAX_LENGTH = 80

    @staticmethod
    def unique_slug(name: str) -> str:
        """
        Slug for ``name`` not yet taken by another portfolio.

        ``Ana Lopez`` becomes ``ana-lopez``, then ``ana-lopez-2``, ...
        """
        base = slugify(name)[:PortfolioService.SLUG_MAX_LENGTH - 6] or 'student'
        slug = base
        suffix = 2
        while Portfolio.objects.filter(slug=slug).exists():
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    @staticmethod
    def get_or_create_for_student(student) -> Portfolio:
        portfolio = Portfolio.objects.filter(student=student).first()
        if portfolio is not None:
            return portfolio

        portfolio = Portfolio.objects.create(
            student=student,
            slug=PortfolioService.unique_slug(student.full_name or student.user.username),
            title=student.full_name,
        )
        logger.info("Portfolio %s created for student %s", portfolio.slug, student.pk)
        return portfolio

    @staticmethod
    def visible_experiences(student):
        """Experiences shown on the portfolio: APPROVED and public."""
        return (
            Experience.objects.filter(
                student=student,
                status=VerificationStatus.APPROVED,
                is_public=True,
            )
            .select_related('organization')
            .order_by('-is_highlighted', '-start_date', '-created_at')
        )

    @staticmethod
    def public_portfolio(slug: str) -> Dict:
        """
        Public view of the portfolio at ``slug``.

        Raises:
            errors.NotFound: No such portfolio, or it is private
        """
        portfolio = (
            Portfolio.objects.select_related('student').filter(slug=slug, is_public=True).first()
        )
        if portfolio is None:
            raise errors.NotFound('Portfolio not found.')

        return {
            'portfolio': portfolio,
            'student': portfolio.student,
            'experiences': PortfolioService.visible_experiences(portfolio.student),
        }
