"""Simple tests (verify pytest working)"""

from unittest import TestCase


class TestPackage(TestCase):

    def test_imports(self):
        """Test that all main imports work"""
        try:
            from piwik_mcp import (
                ApiError,
                AuthenticationError,
                AuthManager,
                Config,
                PiwikClient,
                PiwikMCPError,
                QueryService,
            )
        except ImportError as e:
            self.fail(e)
