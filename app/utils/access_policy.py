"""
Access Policy - resource ownership rules for listing cases and media assets

Pure functions: no database access, no FastAPI imports. Everything the rules need
is carried by an OwnershipView built once from the loaded resource.

    PhotographyCompany -> allowed iff it owns the resource
    Agent              -> allowed iff it is assigned to the (parent) listing case
    anything else      -> denied
"""
import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional


class Role(str, enum.Enum):
    """Closed set of caller roles; unrecognised claims become OTHER"""
    AGENT = "Agent"
    PHOTOGRAPHY_COMPANY = "PhotographyCompany"
    OTHER = "Other"

    @classmethod
    def from_claim(cls, value: Optional[str]) -> Optional["Role"]:
        """Map a raw role claim to a Role. Missing claims map to None."""
        if value is None or not str(value).strip():
            return None
        value = str(value).strip()
        for role in (cls.AGENT, cls.PHOTOGRAPHY_COMPANY):
            if role.value == value:
                return role
        return cls.OTHER


class AccessDecision(str, enum.Enum):
    ALLOW = "Allow"
    DENY = "Deny"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as resolved from the bearer token"""
    user_id: Optional[str]
    role: Optional[Role]
    role_claim: Optional[str] = None

    @classmethod
    def from_claims(cls, user_id: Optional[str], role: Optional[str]) -> "Principal":
        return cls(user_id=user_id or None, role=Role.from_claim(role), role_claim=role)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id) and self.role is not None


@dataclass(frozen=True)
class OwnershipView:
    """Access-relevant slice of a listing case or media asset"""
    resource_id: Optional[int]
    owner_user_id: Optional[str]
    assigned_agent_ids: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def build(cls, resource_id, owner_user_id, agent_ids: Iterable[Optional[str]] = ()) -> "OwnershipView":
        return cls(
            resource_id=resource_id,
            owner_user_id=owner_user_id,
            assigned_agent_ids=frozenset(a for a in agent_ids if a),
        )


def check_access(principal: Optional[Principal], view: Optional[OwnershipView]) -> AccessDecision:
    """
    Evaluate the ownership rules. Never raises: malformed input is a Deny.
    """
    if principal is None or view is None or not principal.is_authenticated:
        return AccessDecision.DENY

    if principal.role is Role.PHOTOGRAPHY_COMPANY:
        allowed = view.owner_user_id is not None and view.owner_user_id == principal.user_id
    elif principal.role is Role.AGENT:
        allowed = principal.user_id in view.assigned_agent_ids
    else:
        allowed = False

    return AccessDecision.ALLOW if allowed else AccessDecision.DENY


def can_access(principal: Optional[Principal], view: Optional[OwnershipView]) -> bool:
    return check_access(principal, view) is AccessDecision.ALLOW


def listing_case_view(listing_case) -> OwnershipView:
    """Ownership view of a listing case with its agent assignments loaded"""
    assignments = listing_case.agent_assignments or []
    return OwnershipView.build(
        listing_case.id,
        listing_case.user_id,
        (assignment.agent_id for assignment in assignments),
    )


def media_asset_view(media_asset) -> OwnershipView:
    """
    Ownership view of a media asset: the uploader owns it, agents come from the
    parent listing case's assignments.
    """
    parent = media_asset.listing_case
    assignments = (parent.agent_assignments or []) if parent is not None else []
    return OwnershipView.build(
        media_asset.id,
        media_asset.user_id,
        (assignment.agent_id for assignment in assignments),
    )
