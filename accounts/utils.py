"""
Accounts app utility functions

Helpers for pulling client metadata off a request for audit records.
"""
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_ipv46_address


def _valid_ip(value):
    value = (value or '').strip()
    if not value:
        return None
    try:
        validate_ipv46_address(value)
    except ValidationError:
        return None
    return value


def get_client_ip(request):
    """
    Client IP address, or ``None`` when it is not a valid address.

    X-Forwarded-For is only honored when ``TRUSTED_PROXY`` is enabled.
    """
    if getattr(settings, 'TRUSTED_PROXY', False):
        forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
        forwarded_ip = _valid_ip(forwarded.split(',')[0])
        if forwarded_ip:
            return forwarded_ip
    return _valid_ip(request.META.get('REMOTE_ADDR'))


def get_user_agent(request) -> str:
    return request.META.get('HTTP_USER_AGENT', '')[:255]
