"""Tests for backend failure classification."""

import pytest

from src.vpp.api.exceptions import NotFoundError, ServerError, ValidationError, VPPError
from src.vpp.assignment.domain.entities import ErrorCategory
from src.vpp.assignment.domain.errors import (
    classify,
    classify_submission,
    get_error_reason,
    is_not_configured,
)


class Unprintable:
    def __str__(self):
        raise RuntimeError("no")


class TestGetErrorReason:

    def test_prefers_backend_reason(self):
        error = NotFoundError("Resource Not Found", reason="MDMConfigAsset was not found")
        assert get_error_reason(error) == "MDMConfigAsset was not found"

    def test_uses_message_attribute(self):
        assert get_error_reason(VPPError("plain message")) == "plain message"

    def test_plain_exception(self):
        assert get_error_reason(RuntimeError("boom")) == "boom"

    def test_strings_and_none(self):
        assert get_error_reason("raw text") == "raw text"
        assert get_error_reason(None) == ""

    def test_never_raises(self):
        assert get_error_reason(Unprintable()) == ""


class TestClassify:

    def test_not_configured_sentinel(self):
        error = NotFoundError("Resource Not Found", reason="MDMConfigAsset was not found")
        assert classify(error) == ErrorCategory.NOT_CONFIGURED
        assert is_not_configured(error)

    def test_sentinel_in_message(self):
        assert classify(RuntimeError("lookup: MDMConfigAsset was not found")) == ErrorCategory.NOT_CONFIGURED

    def test_structured_code(self):
        assert classify(VPPError("whatever", code="vpp_not_configured")) == ErrorCategory.NOT_CONFIGURED

    def test_other_not_found_is_generic(self):
        assert classify(NotFoundError("team not found", reason="team not found")) == ErrorCategory.GENERIC

    def test_sentinel_is_case_sensitive(self):
        assert classify(RuntimeError("mdmconfigasset was not found")) == ErrorCategory.GENERIC

    @pytest.mark.parametrize("failure", [None, 42, Unprintable(), ServerError("boom")])
    def test_unknown_is_generic(self, failure):
        assert classify(failure) == ErrorCategory.GENERIC


class TestClassifySubmission:

    def test_duplicate_reason_is_kept_verbatim(self):
        error = ValidationError("Bad request", status_code=409, reason="License already assigned to team")

        category, reason = classify_submission(error)

        assert category == ErrorCategory.DUPLICATE_ASSIGNMENT
        assert reason == "License already assigned to team"

    def test_duplicate_match_ignores_case(self):
        category, _ = classify_submission(RuntimeError("App ALREADY exists on team"))
        assert category == ErrorCategory.DUPLICATE_ASSIGNMENT

    def test_structured_duplicate_code(self):
        category, _ = classify_submission(VPPError("conflict", code="ALREADY_EXISTS"))
        assert category == ErrorCategory.DUPLICATE_ASSIGNMENT

    def test_generic(self):
        category, reason = classify_submission(ServerError("internal error"))
        assert category == ErrorCategory.GENERIC
        assert reason == "internal error"

    def test_missing_reason(self):
        assert classify_submission(None) == (ErrorCategory.GENERIC, "")

    def test_not_configured_is_not_a_submission_category(self):
        category, _ = classify_submission(RuntimeError("MDMConfigAsset was not found"))
        assert category == ErrorCategory.GENERIC
