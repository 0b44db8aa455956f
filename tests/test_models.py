"""Tests for bump_check.models."""

from __future__ import annotations

from bump_check.models import BaseRevision, Decision, Status, VersionBump, Workspace


class TestWorkspace:
    def test_create_with_required_fields(self) -> None:
        ws = Workspace(name="foo", path="packages/foo")
        assert ws.version is None
        assert ws.private is False
        assert ws.deps == []
        assert ws.next_version is None

    def test_deps_are_not_shared(self) -> None:
        a = Workspace(name="a", path="a")
        b = Workspace(name="b", path="b")
        a.deps.append("b")
        assert b.deps == []


class TestStatus:
    def test_empty_by_default(self) -> None:
        status = Status()
        assert status.decided == status.undecided == status.declined == []


class TestBaseRevision:
    def test_short_hash(self) -> None:
        base = BaseRevision(hash="0123456789abcdef", message="Initial commit")
        assert base.short_hash == "0123456"


class TestDecision:
    def test_values(self) -> None:
        assert Decision("minor") is Decision.MINOR
        assert Decision.UNDECIDED.value == "undecided"


class TestVersionBump:
    def test_create(self) -> None:
        bump = VersionBump(old="1.0.0", new="1.0.1")
        assert bump.old == "1.0.0"
        assert bump.new == "1.0.1"
