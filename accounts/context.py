"""
Request-scoped actor context.

The identity provider is an external collaborator; all the verification
workflow needs from it is who is acting, in which role, and for which
organization. Views build an ``ActorContext`` from the authenticated request
and pass it explicitly into service and engine calls.
"""
from dataclasses import dataclass
from typing import Optional

from .utils import get_client_ip, get_user_agent


@dataclass(frozen=True)
class ActorContext:
    user_id: int
    role: str
    organization_id: Optional[int] = None
    ip_address: Optional[str] = None
    user_agent: str = ''

    @property
    def is_admin(self) -> bool:
        return self.role == 'ADMIN'

    @property
    def is_student(self) -> bool:
        return self.role == 'STUDENT'

    def is_member_of(self, organization_id) -> bool:
        """True when the actor reviews on behalf of ``organization_id``."""
        return (
            self.role == 'ORGANIZATION'
            and self.organization_id is not None
            and self.organization_id == organization_id
        )

    @classmethod
    def from_user(cls, user, **extra) -> 'ActorContext':
        return cls(
            user_id=user.pk,
            role=user.role,
            organization_id=user.organization_id,
            **extra,
        )

    @classmethod
    def from_request(cls, request) -> 'ActorContext':
        return cls.from_user(
            request.user,
            ip_address=get_client_ip(request),
            user_agent=get_user_agent(request),
        )
