"""Document authentication workflow"""

from .service import AuthenticationService, CompletionResult

__all__ = ["AuthenticationService", "CompletionResult"]
