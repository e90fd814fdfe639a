"""Tests for identity_verifier package initialization."""

import identity_verifier


class TestPackageInit:
    """Tests for package initialization."""

    def test_version_exists(self) -> None:
        """Test that __version__ is defined."""
        assert hasattr(identity_verifier, "__version__")

    def test_version_format(self) -> None:
        """
        Test that __version__ follows semantic versioning format.

        Returns:
            None
        """
        parts = identity_verifier.__version__.split(".")
        assert len(parts) >= 2
        assert parts[0].isdigit()
        assert parts[1].isdigit()
