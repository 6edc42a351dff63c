# auth/auth_service.py

from typing import Optional

from backend_service import BackendError


class AuthResult:
    def __init__(self, authenticated: bool, user: Optional[str], role: Optional[str], error: Optional[str] = None):
        self.authenticated = authenticated
        self.user = user
        self.role = role
        self.error = error


class AuthService:
    """
    The idea: main_app only talks to AuthService.
    Today it signs in against Supabase Auth through the backend service.
    Authorization itself (row-level security) is enforced by the backend.
    """

    def __init__(self, backend):
        self.backend = backend

    def login(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            return AuthResult(
                authenticated=False,
                user=None,
                role=None,
                error="Please enter your email and password."
            )

        try:
            user = self.backend.sign_in(email, password)
        except BackendError as e:
            return AuthResult(
                authenticated=False,
                user=None,
                role=None,
                error=f"Login failed: {e.message}"
            )

        if user is None:
            return AuthResult(
                authenticated=False,
                user=None,
                role=None,
                error="Invalid credentials"
            )

        return AuthResult(
            authenticated=True,
            user=getattr(user, "email", None) or email,
            role="admin"
        )

    def logout(self):
        """Returns (success, message) from the backend sign-out."""
        return self.backend.sign_out()
