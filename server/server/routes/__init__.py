"""Route registrations for the WebAuthn demo server."""

# Import submodules to register routes via decorators.
from . import simple  # noqa: F401

__all__ = ["simple"]
