"""
Test Case Suite: Access Policy Module
Test ID Range: TC-001 to TC-010

This test suite validates the ownership rules for listing cases and media assets:
photography companies reach what they own, agents reach what they are assigned to,
and every other caller is denied. No database is involved.
"""

from types import SimpleNamespace
from app.utils.access_policy import (
    AccessDecision,
    OwnershipView,
    Principal,
    Role,
    can_access,
    check_access,
    listing_case_view,
    media_asset_view,
)


def _case(case_id=1, owner="pc-1", agents=()):
    return SimpleNamespace(
        id=case_id,
        user_id=owner,
        agent_assignments=[SimpleNamespace(agent_id=agent_id) for agent_id in agents],
    )


class TestPhotographyCompanyOwnership:
    """
    Test Case TC-001: Photography Company Owns the Listing Case
    Description: Verify that a photography company is allowed exactly on the cases it owns
    Expected Result: Allow for the owner, Deny for any other company
    """
    def test_tc001_owner_is_allowed(self):
        """TC-001: Owner photography company is allowed"""
        principal = Principal.from_claims("pc-1", "PhotographyCompany")
        assert check_access(principal, listing_case_view(_case(owner="pc-1"))) is AccessDecision.ALLOW

    def test_tc001_non_owner_is_denied(self):
        """TC-001: Another photography company is denied"""
        principal = Principal.from_claims("pc-2", "PhotographyCompany")
        assert check_access(principal, listing_case_view(_case(owner="pc-1"))) is AccessDecision.DENY

    """
    Test Case TC-002: Assignment Does Not Grant Companies Access
    Description: A company id listed among the assigned agents is still not the owner
    Expected Result: Deny
    """
    def test_tc002_company_in_assignment_list_is_denied(self):
        """TC-002: Company access depends on ownership only"""
        principal = Principal.from_claims("pc-2", "PhotographyCompany")
        view = listing_case_view(_case(owner="pc-1", agents=["pc-2"]))
        assert not can_access(principal, view)


class TestAgentAssignment:
    """
    Test Case TC-003: Assigned Agent Reaches the Listing Case
    Description: Verify that an agent is allowed iff it is assigned to the case
    Expected Result: Allow for assigned agents, Deny otherwise
    """
    def test_tc003_assigned_agent_is_allowed(self):
        """TC-003: Assigned agent is allowed"""
        principal = Principal.from_claims("agent-1", "Agent")
        view = listing_case_view(_case(agents=["agent-2", "agent-1"]))
        assert can_access(principal, view)

    def test_tc003_unassigned_agent_is_denied(self):
        """TC-003: Unassigned agent is denied"""
        principal = Principal.from_claims("agent-3", "Agent")
        view = listing_case_view(_case(agents=["agent-1"]))
        assert not can_access(principal, view)

    """
    Test Case TC-004: Ownership Does Not Grant Agents Access
    Description: An agent whose id equals the owner id but who is not assigned is denied
    Expected Result: Deny
    """
    def test_tc004_agent_owner_id_without_assignment_is_denied(self):
        """TC-004: Agent access depends on assignment only"""
        principal = Principal.from_claims("agent-1", "Agent")
        assert not can_access(principal, listing_case_view(_case(owner="agent-1", agents=[])))


class TestDenyByDefault:
    """
    Test Case TC-005: Unknown Role Is Denied
    Description: Any role other than Agent or PhotographyCompany is denied everywhere
    Expected Result: Deny, even for the owner id
    """
    def test_tc005_unknown_role_is_denied(self):
        """TC-005: Unknown role is denied"""
        principal = Principal.from_claims("pc-1", "Admin")
        assert principal.role is Role.OTHER
        assert not can_access(principal, listing_case_view(_case(owner="pc-1", agents=["pc-1"])))

    """
    Test Case TC-006: Unauthenticated Principal Is Denied
    Description: Missing user id or missing role claim means unauthenticated
    Expected Result: Deny
    """
    def test_tc006_missing_user_id_is_denied(self):
        """TC-006: Missing user id"""
        principal = Principal.from_claims(None, "PhotographyCompany")
        assert not principal.is_authenticated
        assert not can_access(principal, OwnershipView.build(1, None))

    def test_tc006_missing_role_is_denied(self):
        """TC-006: Missing or blank role claim"""
        for claim in (None, "", "   "):
            principal = Principal.from_claims("pc-1", claim)
            assert principal.role is None
            assert not can_access(principal, listing_case_view(_case(owner="pc-1")))

    """
    Test Case TC-007: Malformed Input Never Raises
    Description: A missing principal or view is a Deny, not an exception
    Expected Result: Deny
    """
    def test_tc007_none_inputs_are_denied(self):
        """TC-007: None principal or view"""
        principal = Principal.from_claims("pc-1", "PhotographyCompany")
        assert check_access(None, listing_case_view(_case())) is AccessDecision.DENY
        assert check_access(principal, None) is AccessDecision.DENY

    def test_tc007_case_without_owner_is_denied(self):
        """TC-007: Resource without an owner id"""
        principal = Principal.from_claims("pc-1", "PhotographyCompany")
        assert not can_access(principal, OwnershipView.build(1, None, [None, ""]))


class TestMediaAssetView:
    """
    Test Case TC-008: Media Asset Ownership
    Description: The uploader owns a media asset; agents come from the parent case
    Expected Result: Uploader and assigned agents allowed, others denied
    """
    def test_tc008_uploader_and_parent_case_agents(self):
        """TC-008: Media asset view combines uploader and parent assignments"""
        parent = _case(owner="pc-1", agents=["agent-1"])
        asset = SimpleNamespace(id=7, user_id="pc-1", listing_case=parent)
        view = media_asset_view(asset)

        assert view.resource_id == 7
        assert can_access(Principal.from_claims("pc-1", "PhotographyCompany"), view)
        assert can_access(Principal.from_claims("agent-1", "Agent"), view)
        assert not can_access(Principal.from_claims("agent-2", "Agent"), view)
        assert not can_access(Principal.from_claims("pc-2", "PhotographyCompany"), view)

    """
    Test Case TC-009: Media Asset Without Parent Case
    Description: Without a loaded parent case no agent is assigned
    Expected Result: Agents denied, uploader still allowed
    """
    def test_tc009_missing_parent_case(self):
        """TC-009: Media asset with no parent case loaded"""
        asset = SimpleNamespace(id=8, user_id="pc-1", listing_case=None)
        view = media_asset_view(asset)
        assert view.assigned_agent_ids == frozenset()
        assert not can_access(Principal.from_claims("agent-1", "Agent"), view)
        assert can_access(Principal.from_claims("pc-1", "PhotographyCompany"), view)


class TestRoleClaims:
    """
    Test Case TC-010: Role Claim Mapping
    Description: Role claims map onto the closed Role set
    Expected Result: Known roles map exactly, whitespace is trimmed, unknown becomes OTHER
    """
    def test_tc010_role_claim_mapping(self):
        """TC-010: Role.from_claim"""
        assert Role.from_claim("Agent") is Role.AGENT
        assert Role.from_claim(" PhotographyCompany ") is Role.PHOTOGRAPHY_COMPANY
        assert Role.from_claim("photographycompany") is Role.OTHER
        assert Role.from_claim(None) is None
