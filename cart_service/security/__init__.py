from .auth import AuthenticatedUser, get_token_verifier, optional_user, require_user

__all__ = ["AuthenticatedUser", "get_token_verifier", "optional_user", "require_user"]
