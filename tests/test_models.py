"""Tests for hadith and schedule records."""

import pytest
from fakes import H1_DOC, make_hadith_doc
from pydantic import ValidationError

from hadithmaster.models import DailySchedule, Hadith


class TestHadith:
    """Test Hadith validation and helpers."""

    def test_camel_case_document(self) -> None:
        hadith = Hadith.model_validate(dict(H1_DOC, id="h1"))

        assert hadith.id == "h1"
        assert hadith.narrator == "Umar ibn Al-Khattab"
        assert hadith.book == "Sahih al-Bukhari"
        assert hadith.reference.book_number == 1
        assert hadith.is_active
        assert hadith.tags == ["intention", "actions"]

    def test_flat_document_shape(self) -> None:
        """Documents with top-level text, narrator and book are accepted."""
        hadith = Hadith.model_validate(
            {"_id": "abc", "text": "Be kind.", "narrator": "Anas", "book": "Sunan Abi Dawud"}
        )

        assert hadith.text == "Be kind."
        assert hadith.narrator == "Anas"
        assert hadith.book == "Sunan Abi Dawud"
        assert hadith.is_active

    def test_numeric_id_and_book_are_coerced(self) -> None:
        hadith = Hadith.model_validate(make_hadith_doc(id=7, reference={"book": 1}))
        assert hadith.id == "7"
        assert hadith.book == "1"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"english": {"narrator": "", "text": "x"}},
            {"english": {"narrator": "x"}},
            {"reference": {}},
        ],
        ids=["empty-narrator", "missing-text", "missing-book"],
    )
    def test_invalid_documents_rejected(self, overrides: dict) -> None:
        with pytest.raises(ValidationError):
            Hadith.model_validate(make_hadith_doc(**overrides))

    def test_to_document_uses_field_names_without_id(self) -> None:
        doc = Hadith.model_validate(dict(H1_DOC, id="h1")).to_document()

        assert "id" not in doc
        assert doc["isActive"] is True
        assert doc["reference"]["bookNumber"] == 1
        assert doc["english"]["text"] == "Verily actions are by intentions..."
        assert "createdAt" not in doc

    def test_json_round_trip_preserves_equality(self) -> None:
        hadith = Hadith.model_validate(dict(H1_DOC, id="h1"))
        assert Hadith.model_validate_json(hadith.model_dump_json(by_alias=True)) == hadith

    def test_is_frozen(self) -> None:
        hadith = Hadith.model_validate(H1_DOC)
        with pytest.raises(ValidationError):
            hadith.category = "other"  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("reference", "expected"),
        [
            ({"book": "Sahih Muslim", "bookNumber": 4, "hadithNumber": 12}, "Sahih Muslim 4:12"),
            ({"book": "Riyad as-Salihin", "hadithNumber": 27}, "Riyad as-Salihin 27"),
            ({"book": "Sahih Muslim"}, "Sahih Muslim"),
        ],
        ids=["book-and-number", "number-only", "book-only"],
    )
    def test_citation(self, reference: dict, expected: str) -> None:
        hadith = Hadith.model_validate(make_hadith_doc(reference=reference))
        assert hadith.citation() == expected

    @pytest.mark.parametrize(
        ("term", "expected"),
        [
            ("INTENTIONS", True),
            ("umar", True),
            ("bukhari", True),
            ("intention", True),
            ("patience", False),
        ],
    )
    def test_matches(self, term: str, expected: bool) -> None:
        assert Hadith.model_validate(H1_DOC).matches(term) is expected


class TestDailySchedule:
    """Test DailySchedule validation."""

    def test_from_document(self) -> None:
        schedule = DailySchedule.model_validate(
            {"id": "s1", "date": "2024-12-30", "hadithId": 1}
        )

        assert schedule.hadith_id == "1"
        assert schedule.featured is True
        assert schedule.sent is False

    @pytest.mark.parametrize("date", ["30/12/2024", "2024-12-30T00:00:00", "Mon Dec 30 2024"])
    def test_rejects_non_day_key_dates(self, date: str) -> None:
        with pytest.raises(ValidationError):
            DailySchedule.model_validate({"date": date, "hadithId": "h1"})

    def test_requires_hadith_id(self) -> None:
        with pytest.raises(ValidationError):
            DailySchedule.model_validate({"date": "2024-12-30", "hadithId": ""})
