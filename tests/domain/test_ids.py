"""Tests for entity ID generation and validation."""

import pytest

from campusctl.domain.ids import ID_PATTERNS, KIND_PREFIXES, generate_id, kind_of, validate_id
from campusctl.domain.types import EntityKind


class TestGenerateId:
    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_prefix_matches_kind(self, kind: EntityKind) -> None:
        assert generate_id(kind).startswith(KIND_PREFIXES[kind])

    def test_accepts_plain_string_kind(self) -> None:
        assert generate_id("edge").startswith("edge_")

    def test_unique(self) -> None:
        ids = {generate_id(EntityKind.NODE) for _ in range(500)}
        assert len(ids) == 500

    def test_matches_pattern(self) -> None:
        value = generate_id(EntityKind.SPACE)
        assert ID_PATTERNS[EntityKind.SPACE].match(value)

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(ValueError):
            generate_id("room")


class TestValidateId:
    def test_generated_id_is_valid(self) -> None:
        assert validate_id(generate_id(EntityKind.FLOOR), EntityKind.FLOOR) is True

    def test_wrong_kind(self) -> None:
        assert validate_id(generate_id(EntityKind.FLOOR), EntityKind.NODE) is False

    def test_hand_written_id(self) -> None:
        assert validate_id("lobby", EntityKind.NODE) is False

    def test_unknown_kind(self) -> None:
        assert validate_id("node_x", "corridor") is False


class TestKindOf:
    def test_building(self) -> None:
        assert kind_of(generate_id(EntityKind.BUILDING)) == EntityKind.BUILDING

    def test_unrecognized(self) -> None:
        assert kind_of("n1") is None
