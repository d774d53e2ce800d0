"""Application entry point for the WebAuthn demo server."""
from __future__ import annotations

from .config import app

# Import the route modules so their decorators register endpoints with Flask.
from .routes import simple  # noqa: F401


def main() -> None:
    # Note: using localhost without TLS, as some browsers do
    # not allow Webauthn in case of TLS certificate errors.
    app.run(host="localhost", port=5000, debug=True)


__all__ = ["app", "main"]


if __name__ == "__main__":  # pragma: no cover - convenience script entry point.
    main()
