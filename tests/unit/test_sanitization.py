"""Tests for InputSanitizer (nh3 markup stripping)."""

from app.shared.utils.sanitization import InputSanitizer


def test_clean_text_strips_tags() -> None:
    """HTML tags are stripped from text."""
    assert InputSanitizer.clean_text("  <script>alert(1)</script>Hello <b>there</b> ") == "Hello there"


def test_clean_text_empty() -> None:
    """Empty input stays empty."""
    assert InputSanitizer.clean_text("") == ""


def test_clean_tags_dedupes_and_drops_blank() -> None:
    """Tags are cleaned, deduplicated and blanks dropped."""
    assert InputSanitizer.clean_tags(["billing", " ", "<i>billing</i>", "refunds"]) == [
        "billing",
        "refunds",
    ]
    assert InputSanitizer.clean_tags(None) == []


def test_business_name_drops_punctuation() -> None:
    """Business names keep only safe characters."""
    assert InputSanitizer.business_name(" Acme, Inc. ") == "Acme Inc"
