"""Unit tests for locale-aware name collation."""

import pytest

from school_portal.ranker.collation import collation_key, compare_names


class TestCollationKey:
    """Tests for the three-level collation key."""

    @pytest.mark.unit
    def test_primary_level_ignores_case_and_accents(self) -> None:
        """Accents and case do not affect the primary level."""
        assert collation_key("Álvaro")[0] == collation_key("alvaro")[0]

    @pytest.mark.unit
    def test_cedilla_decomposes_to_base_letter(self) -> None:
        """ç collates as c at the primary level."""
        assert collation_key("Çaio")[0] == "caio"


class TestCompareNames:
    """Tests for compare_names ordering."""

    @pytest.mark.unit
    def test_alphabetical_order(self) -> None:
        """Plain names compare alphabetically."""
        assert compare_names("Ana", "Bruno") < 0
        assert compare_names("Carla", "Bruno") > 0

    @pytest.mark.unit
    def test_identical_names_are_equal(self) -> None:
        """A name compares equal to itself."""
        assert compare_names("João", "João") == 0

    @pytest.mark.unit
    def test_accented_initial_sorts_with_its_base_letter(self) -> None:
        """Á sorts among the A names, not after Z."""
        assert compare_names("Ábio", "Abra") < 0
        assert compare_names("Élio", "Zeca") < 0

    @pytest.mark.unit
    def test_unaccented_before_accented_when_letters_match(self) -> None:
        """Accents only break ties between otherwise equal names."""
        assert compare_names("Abio", "Ábio") < 0
        assert compare_names("Jose", "José") < 0

    @pytest.mark.unit
    def test_lowercase_before_uppercase_when_otherwise_equal(self) -> None:
        """Case is the last level considered."""
        assert compare_names("ana", "Ana") < 0

    @pytest.mark.unit
    def test_case_does_not_override_letters(self) -> None:
        """Uppercase B still sorts after lowercase a."""
        assert compare_names("alice", "Bruno") < 0
        assert compare_names("Bruno", "alice") > 0

    @pytest.mark.unit
    def test_sorting_a_class_list(self) -> None:
        """A mixed list sorts the way a Portuguese class list reads."""
        names = ["Érica", "eduardo", "Zé", "Ana", "Ângela", "Bruno", "ana"]
        assert sorted(names, key=collation_key) == [
            "ana",
            "Ana",
            "Ângela",
            "Bruno",
            "eduardo",
            "Érica",
            "Zé",
        ]

    @pytest.mark.unit
    def test_accent_order_follows_portuguese_rules(self) -> None:
        """Acute sorts before grave, circumflex before tilde."""
        assert compare_names("Álvaro", "Àlvaro") < 0
        assert compare_names("Âna", "Ãna") < 0
        assert compare_names("Lüis", "Lũis") < 0

    @pytest.mark.unit
    def test_stroke_letters_sort_with_their_base_letter(self) -> None:
        """Ł and Ø sort with L and O rather than after Z."""
        assert compare_names("Łucas", "Mario") < 0
        assert compare_names("Lucas", "Łucas") < 0
        assert compare_names("Øyvind", "Zeca") < 0
        assert collation_key("Øyvind")[0] == "oyvind"

    @pytest.mark.unit
    def test_ligatures_expand(self) -> None:
        """ß and æ collate as their two-letter spellings."""
        assert collation_key("Strauß")[0] == "strauss"
        assert compare_names("Æsa", "Afonso") < 0
