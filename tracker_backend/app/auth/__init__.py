from .identity import IdentityVerifier, VerifiedUser, parse_authorization, precheck_jwt

__all__ = ["IdentityVerifier", "VerifiedUser", "parse_authorization", "precheck_jwt"]
