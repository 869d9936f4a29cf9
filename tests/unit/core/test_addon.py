"""Tests for llynx.core.addon module."""

from llynx.core.addon import Addon


class TestAddonIdentity:
    """Tests for Addon equality and ordering."""

    def test_equal_regardless_of_location(self):
        """Addons with the same name and version are equal."""
        installed = Addon("say", "1.4.1-3", ".lls_addons/lib/luarocks/rocks-5.1/say/1.4.1-3")
        online = Addon("say", "1.4.1-3")

        assert installed == online
        assert hash(installed) == hash(online)

    def test_different_versions_differ(self):
        """Different versions are different addons."""
        assert Addon("say", "1.4.1-3") != Addon("say", "1.3-1")

    def test_sorts_by_name_then_version(self):
        """Sort order is lexicographic on (name, version)."""
        addons = [
            Addon("say", "1.4.1-3"),
            Addon("luassert", "1.9.0-1"),
            Addon("say", "1.3-1", "somewhere"),
        ]

        assert [a.key for a in sorted(addons)] == [
            ("luassert", "1.9.0-1"),
            ("say", "1.3-1"),
            ("say", "1.4.1-3"),
        ]

    def test_set_deduplicates_by_identity(self):
        """A set keeps one addon per (name, version)."""
        addons = {Addon("say", "1.4.1-3", "a"), Addon("say", "1.4.1-3", "b")}

        assert len(addons) == 1


class TestAddonMatches:
    """Tests for Addon.matches() method."""

    def test_no_filter_matches(self):
        assert Addon("say", "1.0").matches(None)

    def test_substring_matches(self):
        assert Addon("luassert", "1.0").matches("assert")

    def test_non_matching_filter(self):
        assert not Addon("say", "1.0").matches("busted")
