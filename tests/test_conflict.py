from pathlib import Path

import pytest

from bbb_dl.media.conflict import resolve_conflict
from bbb_dl.models.download import ConflictPolicy


@pytest.fixture
def existing(tmp_path: Path) -> Path:
    target = tmp_path / "slide-1.png"
    target.write_bytes(b"x" * 10)
    return target


@pytest.mark.parametrize("policy", list(ConflictPolicy))
def test_free_target_is_used_as_is(tmp_path: Path, policy: ConflictPolicy) -> None:
    target = tmp_path / "new.png"
    assert resolve_conflict(policy, target, 10) == target


def test_make_unique_picks_next_free_name(existing: Path) -> None:
    (existing.parent / "slide-1 (1).png").write_bytes(b"")

    assert resolve_conflict(ConflictPolicy.MAKE_UNIQUE, existing, 10) == (
        existing.parent / "slide-1 (2).png"
    )


def test_overwrite_always_returns_target(existing: Path) -> None:
    assert resolve_conflict(ConflictPolicy.OVERWRITE, existing, 1) == existing


def test_skip_never_replaces(existing: Path) -> None:
    assert resolve_conflict(ConflictPolicy.SKIP, existing, 1000) is None


@pytest.mark.parametrize(
    ("incoming_size", "expected_skip"),
    [(5, True), (10, True), (11, False), (None, False)],
)
def test_skip_unless_smaller(existing: Path, incoming_size, expected_skip) -> None:
    result = resolve_conflict(ConflictPolicy.SKIP_UNLESS_SMALLER, existing, incoming_size)

    assert (result is None) is expected_skip


def test_policy_parse_accepts_names_in_any_case() -> None:
    assert ConflictPolicy.parse("Skip-Unless-Smaller") is ConflictPolicy.SKIP_UNLESS_SMALLER
    with pytest.raises(ValueError, match="Unknown conflict policy"):
        ConflictPolicy.parse("rename")
