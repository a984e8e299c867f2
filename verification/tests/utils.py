"""
Shared builders for tests across apps.
"""
from accounts.context import ActorContext
from accounts.models import User
from experience.models import Experience, VerificationStatus
from organizations.models import Organization
from profiles.models import StudentProfile


def make_organization(name='Acme University', slug=None, **extra):
    return Organization.objects.create(name=name, slug=slug or name.lower().replace(' ', '-'), **extra)


def make_member(organization, username='reviewer', **extra):
    return User.objects.create_user(
        username=username,
        password='pass12345',
        role=User.ORGANIZATION,
        organization=organization,
        **extra,
    )


def make_admin(username='admin'):
    return User.objects.create_user(username=username, password='pass12345', role=User.ADMIN)


def make_student(username='student', full_name='Ana Lopez'):
    user = User.objects.create_user(username=username, password='pass12345', role=User.STUDENT)
    profile = StudentProfile.objects.create(user=user, full_name=full_name)
    return user, profile


def make_experience(student, organization=None, status=VerificationStatus.DRAFT, **extra):
    values = {
        'title': 'Data internship',
        'description': 'Built reporting pipelines.',
        'type': Experience.Type.INTERNSHIP,
        'skills': ['Python', 'SQL'],
    }
    values.update(extra)
    return Experience.objects.create(
        student=student,
        organization=organization,
        status=status,
        **values,
    )


def actor_for(user):
    return ActorContext.from_user(user, ip_address='127.0.0.1', user_agent='tests')
