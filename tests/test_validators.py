"""
Test the pure field validators.
"""
from datetime import date, timedelta

from library_api.common.validators import (
    is_blank,
    normalize_isbn,
    parse_iso_date,
    validate_author_data,
    validate_book_data,
    validate_contact_data,
)
from library_api.core.db import generate_id


def _valid_book(**overrides):
    data = {
        "title": "B1",
        "author_id": generate_id(),
        "isbn": "1234567890123",
        "genre": "G",
        "published_date": "2020-01-01",
        "description": "d",
        "total_pages": 100,
    }
    data.update(overrides)
    return data


class TestHelpers:
    """Test the small helpers shared by the validators."""

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("   ")
        assert not is_blank("a")
        assert not is_blank(0)
        assert not is_blank(False)

    def test_normalize_isbn_strips_separators(self):
        assert normalize_isbn("978-0-13-468599-1") == "9780134685991"
        assert normalize_isbn(" 978 0134685991 ") == "9780134685991"

    def test_parse_iso_date(self):
        assert parse_iso_date("2020-02-29") == date(2020, 2, 29)
        assert parse_iso_date("2021-02-29") is None
        assert parse_iso_date("01/02/2020") is None
        assert parse_iso_date(20200101) is None


class TestAuthorValidation:
    """Test author validation rules."""

    def test_missing_fields_reported_together(self):
        result = validate_author_data({})

        assert result.is_valid is False
        assert result.errors == [
            "Name is required",
            "Bio is required",
            "Birth date is required",
            "Nationality is required",
        ]

    def test_whitespace_only_counts_as_missing(self):
        result = validate_author_data(
            {"name": "   ", "bio": "x", "birth_date": "1980-01-01", "nationality": "T"}
        )
        assert result.errors == ["Name is required"]

    def test_valid_author(self):
        result = validate_author_data(
            {
                "name": "Test",
                "bio": "x",
                "birth_date": "1980-01-01",
                "nationality": "T",
                "email": "a@b.co",
                "website": "https://example.com",
                "social_media": {"twitter": "@t"},
                "awards": ["Hugo"],
            }
        )
        assert result.is_valid is True
        assert result.errors == []

    def test_format_errors_accumulate(self):
        result = validate_author_data(
            {
                "name": "Test",
                "bio": "x",
                "birth_date": "1980/01/01",
                "nationality": "T",
                "email": "not-an-email",
                "website": "example.com",
            }
        )
        assert result.errors == [
            "Invalid birth date format (should be YYYY-MM-DD)",
            "Invalid email format",
            "Website must start with http:// or https://",
        ]

    def test_future_birth_date(self):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        result = validate_author_data(
            {"name": "T", "bio": "x", "birth_date": tomorrow, "nationality": "T"}
        )
        assert result.errors == ["Birth date cannot be in the future"]

    def test_impossible_calendar_date(self):
        result = validate_author_data(
            {"name": "T", "bio": "x", "birth_date": "1980-02-30", "nationality": "T"}
        )
        assert result.errors == ["1980-02-30 is not a valid calendar date"]

    def test_update_skips_presence_checks(self):
        assert validate_author_data({"nationality": "French"}, is_update=True).is_valid

    def test_update_rejects_blank_required_field(self):
        result = validate_author_data({"name": ""}, is_update=True)
        assert result.errors == ["Name cannot be empty"]

    def test_update_still_checks_formats(self):
        result = validate_author_data({"email": "bad"}, is_update=True)
        assert result.errors == ["Invalid email format"]

    def test_unknown_social_media_handle(self):
        result = validate_author_data({"social_media": {"myspace": "x"}}, is_update=True)
        assert not result.is_valid
        assert "myspace" in result.errors[0]

    def test_awards_must_be_strings(self):
        result = validate_author_data({"awards": ["Hugo", 3]}, is_update=True)
        assert result.errors == ["Awards must be a list of strings"]

    def test_text_fields_must_be_strings(self):
        result = validate_author_data(
            {"name": 42, "bio": ["x"], "birth_date": "1980-01-01", "nationality": "T"}
        )
        assert result.errors == ["Name must be a string", "Bio must be a string"]

    def test_null_is_active_on_create_uses_default(self):
        data = {"name": "A", "bio": "b", "birth_date": "1980-01-01", "nationality": "T"}
        assert validate_author_data({**data, "is_active": None}).is_valid
        assert validate_author_data({**data, "is_active": "yes"}).errors == [
            "isActive must be a boolean"
        ]

    def test_null_is_active_on_update_rejected(self):
        result = validate_author_data({"is_active": None}, is_update=True)
        assert result.errors == ["isActive must be a boolean"]


class TestBookValidation:
    """Test book validation rules."""

    def test_valid_book(self):
        assert validate_book_data(_valid_book()).is_valid

    def test_missing_fields(self):
        result = validate_book_data({})
        assert result.errors == [
            "Title is required",
            "Author ID is required",
            "ISBN is required",
            "Genre is required",
            "Published date is required",
            "Description is required",
            "Total pages is required",
        ]

    def test_isbn_with_hyphens_is_accepted(self):
        assert validate_book_data(_valid_book(isbn="978-0-13-468599-1")).is_valid

    def test_isbn_format(self):
        result = validate_book_data(_valid_book(isbn="12345"))
        assert result.errors == ["Invalid ISBN format (should be 10 to 17 digits)"]

    def test_total_pages_range(self):
        assert validate_book_data(_valid_book(total_pages=0)).errors == [
            "Total pages must be between 1 and 10000"
        ]
        assert validate_book_data(_valid_book(total_pages=10001)).errors == [
            "Total pages must be between 1 and 10000"
        ]
        assert validate_book_data(_valid_book(total_pages=10000)).is_valid

    def test_rating_range(self):
        assert validate_book_data(_valid_book(rating=5.5)).errors == [
            "Rating must be between 0 and 5"
        ]
        assert validate_book_data(_valid_book(rating=0)).is_valid
        assert validate_book_data(_valid_book(rating=5)).is_valid

    def test_author_id_format(self):
        result = validate_book_data(_valid_book(author_id="not-an-id"))
        assert result.errors == ["Invalid author ID format"]

    def test_published_date_format(self):
        result = validate_book_data(_valid_book(published_date="2020"))
        assert result.errors == ["Invalid date format (should be YYYY-MM-DD)"]

    def test_update_with_null_rating(self):
        result = validate_book_data({"rating": None}, is_update=True)
        assert result.errors == ["Rating cannot be empty"]

    def test_update_with_only_genre(self):
        assert validate_book_data({"genre": "Poetry"}, is_update=True).is_valid


class TestContactValidation:
    """Test contact validation rules."""

    def test_missing_fields(self):
        result = validate_contact_data({})
        assert result.errors == [
            "First name is required",
            "Last name is required",
            "Email is required",
            "Favorite color is required",
            "Birthday is required",
        ]

    def test_formats(self):
        result = validate_contact_data(
            {
                "first_name": "A",
                "last_name": "B",
                "email": "nope",
                "favorite_color": "Red",
                "birthday": "12-03-1992",
            }
        )
        assert result.errors == [
            "Invalid email format",
            "Invalid birthday format (should be YYYY-MM-DD)",
        ]

    def test_update_mode(self):
        assert validate_contact_data({"favorite_color": "Blue"}, is_update=True).is_valid
        assert validate_contact_data({"email": " "}, is_update=True).errors == [
            "Email cannot be empty"
        ]

    def test_wrong_type_reported_with_missing_fields(self):
        result = validate_contact_data({"first_name": 1, "email": "a@b.co"})
        assert result.errors == [
            "First name must be a string",
            "Last name is required",
            "Favorite color is required",
            "Birthday is required",
        ]
