"""Test utilities for clutterbuck applications.

    from clutterbuck.testing import TestClient
"""

from clutterbuck.testing.client import TestClient

__all__ = ["TestClient"]
