"""Tests for the material fingerprint."""

from daily_digest.store.hash import compute_materials_fingerprint, sha256_hex
from tests.helpers.builders import make_material


class TestComputeMaterialsFingerprint:
    """Tests for compute_materials_fingerprint."""

    def test_deterministic(self) -> None:
        """Equal material lists give equal fingerprints."""
        first = [make_material(1), make_material(2)]
        second = [make_material(1), make_material(2)]
        assert compute_materials_fingerprint(first) == compute_materials_fingerprint(
            second
        )

    def test_text_change_changes_fingerprint(self) -> None:
        """Changing any text changes the fingerprint."""
        base = [make_material(1, text="one")]
        changed = [make_material(1, text="two")]
        assert compute_materials_fingerprint(base) != compute_materials_fingerprint(
            changed
        )

    def test_order_matters(self) -> None:
        """Reordering materials changes the fingerprint."""
        a = make_material(1, link="https://x.com/a")
        b = make_material(1, link="https://x.com/b")
        assert compute_materials_fingerprint([a, b]) != compute_materials_fingerprint(
            [b, a]
        )

    def test_empty_list(self) -> None:
        """The empty list hashes the empty JSON array."""
        assert compute_materials_fingerprint([]) == sha256_hex("[]")

    def test_missing_date_equals_empty_string(self) -> None:
        """A missing publish date hashes like an empty one."""
        assert compute_materials_fingerprint(
            [make_material(1, publish_date=None)]
        ) == compute_materials_fingerprint([make_material(1, publish_date="")])
