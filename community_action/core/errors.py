# File: community_action/core/errors.py

"""
Exception types raised by the service layer.

Routes translate these into HTTP responses: pages turn them into a notice
plus a redirect, the JSON API turns them into status codes.
"""

from typing import Dict


class CommunityActionError(Exception):
    """Base class for every error raised by the application."""


class GatewayError(CommunityActionError):
    """A read or write against the data store failed."""


class AuthError(CommunityActionError):
    """Sign-in could not be completed (unknown provider, bad credentials)."""


class AuthenticationRequired(CommunityActionError):
    """The action needs a signed-in user.

    ``return_to`` is the path the user should come back to after signing in.
    """

    def __init__(self, return_to: str = "/projects"):
        super().__init__("Authentication required.")
        self.return_to = return_to


class PermissionDenied(CommunityActionError):
    pass


class ProjectNotFound(CommunityActionError):
    def __init__(self, project_id):
        super().__init__(f"Project {project_id} not found.")
        self.project_id = project_id


class FormValidationError(CommunityActionError):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("Form is invalid.")
        self.errors = errors
