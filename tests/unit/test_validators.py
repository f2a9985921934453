"""Unit tests for field validators."""

from flow_editor.forms.validators import (
    validate,
    validate_email,
    validate_max_length,
    validate_required,
    validate_url,
)


class TestValidators:
    """Tests for individual validators."""

    def test_required(self):
        """Test blank values fail the required check."""
        assert validate_required("Message", "Hi") is None
        assert validate_required("Message", "   ").message == "Message is required"
        assert validate_required("Recipients", []) is not None
        assert validate_required("Channel", None) is not None

    def test_url(self):
        """Test URL validation accepts http(s) URLs and expressions."""
        assert validate_url("URL", "https://example.com/hook") is None
        assert validate_url("URL", "@(url_encode(contact.name))") is None
        assert validate_url("URL", "ftp://example.com") is not None
        assert validate_url("URL", "not a url") is not None

    def test_email(self):
        """Test email validation over single values and lists."""
        assert validate_email("Recipients", "bob@example.com") is None
        assert validate_email("Recipients", ["bob@example.com", "@contact.email"]) is None

        failure = validate_email("Recipients", ["bob@example.com", "bob"])
        assert failure is not None
        assert "bob" in failure.message

    def test_max_length(self):
        """Test the max length factory."""
        check = validate_max_length(5)

        assert check("Name", "abcde") is None
        assert check("Name", "abcdef").message == "Name cannot be more than 5 characters"


class TestValidate:
    """Tests for running validator chains."""

    def test_collects_failures(self):
        """Test failing validators contribute failures to the entry."""
        entry = validate("Name", "", [validate_required, validate_max_length(10)])

        assert entry.value == ""
        assert len(entry.validation_failures) == 1
        assert not entry.valid

    def test_valid_entry(self):
        """Test a passing chain gives a valid entry."""
        entry = validate("Name", "color", [validate_required, validate_max_length(64)])

        assert entry.valid
        assert entry.validation_failures == ()
