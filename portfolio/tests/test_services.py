from django.test import TestCase
from rest_framework.test import APIClient

from portfolio.models import Portfolio
from portfolio.services import PortfolioService
from verification import errors
from verification.engine import VerificationEngine
from verification.tests.utils import actor_for, make_experience, make_member, make_organization, make_student


class PortfolioServiceTests(TestCase):
    def setUp(self) -> None:
        self.organization = make_organization()
        self.reviewer = make_member(self.organization)
        self.student_user, self.student = make_student()

    def test_slug_is_derived_from_name_and_deduplicated(self) -> None:
        _, namesake = make_student('namesake', 'Ana Lopez')

        first = PortfolioService.get_or_create_for_student(self.student)
        second = PortfolioService.get_or_create_for_student(namesake)

        self.assertEqual(first.slug, 'ana-lopez')
        self.assertEqual(second.slug, 'ana-lopez-2')
        self.assertEqual(PortfolioService.get_or_create_for_student(self.student), first)

    def test_public_portfolio_lists_only_verified_public_experiences(self) -> None:
        portfolio = PortfolioService.get_or_create_for_student(self.student)
        approved = make_experience(self.student, self.organization, title='Verified')
        make_experience(self.student, self.organization, title='Draft')
        engine = VerificationEngine()
        engine.submit(approved.pk, actor_for(self.student_user))
        engine.approve(approved.pk, actor_for(self.reviewer))

        data = PortfolioService.public_portfolio(portfolio.slug)

        self.assertEqual(data['student'], self.student)
        self.assertEqual(list(data['experiences']), [approved])

    def test_private_or_missing_portfolio_is_not_found(self) -> None:
        portfolio = PortfolioService.get_or_create_for_student(self.student)
        Portfolio.objects.filter(pk=portfolio.pk).update(is_public=False)

        with self.assertRaises(errors.NotFound):
            PortfolioService.public_portfolio(portfolio.slug)
        with self.assertRaises(errors.NotFound):
            PortfolioService.public_portfolio('nobody')


class PortfolioApiTests(TestCase):
    def test_owner_can_update_presentation(self) -> None:
        student_user, _ = make_student()
        client = APIClient()
        client.force_authenticate(student_user)

        response = client.patch('/api/portfolio/me/', {'headline': 'Data engineer in training', 'slug': 'hijack'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['headline'], 'Data engineer in training')
        self.assertEqual(response.data['slug'], 'ana-lopez')

    def test_unknown_public_portfolio(self) -> None:
        response = APIClient().get('/api/public/portfolios/nobody/')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['kind'], 'NOT_FOUND')
