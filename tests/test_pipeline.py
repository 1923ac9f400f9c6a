"""Tests for the response validation pipeline."""

from unittest.mock import MagicMock

import pytest
from apibase import (
    ContentTypeMismatchError,
    ContentTypeStep,
    HTTPFailureError,
    IsHTTPStep,
    NonHTTPResponseError,
    Response,
    ResponsePipeline,
    StatusCodeStep,
    ValidationStep,
    has_content_type,
    is_http_response,
    validate_status_code,
)
from apibase.pipeline.steps import content_type_matches
from multidict import CIMultiDict, CIMultiDictProxy


def make_response(status=200, data=b"", headers=None):
    """Build a response without a transport."""
    return Response(
        data=data,
        status=status,
        headers=CIMultiDictProxy(CIMultiDict(headers or {})),
        url="http://test/",
    )


class TestIsHttpResponse:
    """Tests for the is-HTTP check."""

    def test_http_response_passes(self):
        """Test that a response with a status passes unchanged."""
        response = make_response(204)
        assert is_http_response(response) is response

    def test_non_http_response_fails(self):
        """Test that a response without a status fails."""
        with pytest.raises(NonHTTPResponseError):
            is_http_response(make_response(status=None))

    def test_step(self):
        """Test the step wrapper."""
        with pytest.raises(NonHTTPResponseError):
            IsHTTPStep().check(make_response(status=None))


class TestValidateStatusCode:
    """Tests for status code validation."""

    def test_accepted_status_passes(self):
        """Test that 200 in 200..<300 passes unchanged."""
        response = make_response(200)
        assert validate_status_code(response, range(200, 300)) is response

    def test_rejected_status_carries_code(self):
        """Test that 400 fails with HTTPFailureError(400)."""
        response = make_response(400)
        with pytest.raises(HTTPFailureError) as exc_info:
            validate_status_code(response, range(200, 300))
        assert exc_info.value.status == 400
        assert exc_info.value.response is response

    def test_range_upper_bound_exclusive(self):
        """Test that 300 is outside range(200, 300)."""
        with pytest.raises(HTTPFailureError):
            validate_status_code(make_response(300), range(200, 300))

    def test_explicit_set(self):
        """Test an explicit set of codes."""
        step = StatusCodeStep({200, 404})
        assert step.check(make_response(404)).status == 404
        with pytest.raises(HTTPFailureError):
            step.check(make_response(201))

    def test_default_is_2xx(self):
        """Test the default accepted codes."""
        assert validate_status_code(make_response(299)).status == 299
        with pytest.raises(HTTPFailureError):
            validate_status_code(make_response(500))


class TestHasContentType:
    """Tests for Content-Type validation."""

    def test_exact_match(self):
        """Test an exact media type match."""
        response = make_response(data=b"a", headers={"Content-Type": "text/plain"})
        assert has_content_type(response, "text/plain") is response

    def test_match_with_charset(self):
        """Test a match with a charset parameter."""
        response = make_response(data=b"a", headers={"Content-Type": "text/plain; charset=utf-8"})
        assert has_content_type(response, "text/plain") is response

    def test_expected_with_parameters_matches_identical_header(self):
        """Test that a header equal to an expected value with parameters passes."""
        response = make_response(data=b"a", headers={"Content-Type": "text/plain; charset=utf-8"})
        assert has_content_type(response, "text/plain; charset=utf-8") is response

    def test_expected_with_parameters_rejects_other_charset(self):
        """Test that a different charset fails when the expected value names one."""
        response = make_response(data=b"a", headers={"Content-Type": "text/plain; charset=latin-1"})
        with pytest.raises(ContentTypeMismatchError):
            has_content_type(response, "text/plain; charset=utf-8")

    def test_wrong_type(self):
        """Test that a different media type fails."""
        response = make_response(data=b"a", headers={"Content-Type": "text/html"})
        with pytest.raises(ContentTypeMismatchError) as exc_info:
            has_content_type(response, "text/plain")
        assert exc_info.value.expected == "text/plain"
        assert exc_info.value.actual == "text/html"

    def test_missing_header(self):
        """Test that a missing header fails for a non-empty body."""
        with pytest.raises(ContentTypeMismatchError) as exc_info:
            has_content_type(make_response(data=b"a"), "text/plain")
        assert exc_info.value.actual is None

    def test_empty_body_passes(self):
        """Test that an empty body passes regardless of header."""
        response = make_response(204, headers={"Content-Type": "text/html"})
        assert has_content_type(response, "text/plain") is response

    def test_step(self):
        """Test the step wrapper."""
        step = ContentTypeStep("application/json")
        assert step.expected == "application/json"
        with pytest.raises(ContentTypeMismatchError):
            step.check(make_response(data=b"{}", headers={"Content-Type": "text/plain"}))


class TestContentTypeMatches:
    """Tests for the Content-Type comparison rules."""

    @pytest.mark.parametrize(
        "header",
        [
            "text/plain",
            "TEXT/Plain",
            "text/plain;charset=utf-8",
            "text/plain ; Charset=ISO-8859-1",
            "text/plain; charset=",
            "text/plain; charset=utf-8; format=flowed",
        ],
    )
    def test_matching(self, header):
        """Test values that match text/plain."""
        assert content_type_matches(header, "text/plain") is True

    @pytest.mark.parametrize(
        "header",
        [
            None,
            "",
            "text/plainx",
            "text/plain; format=flowed",
        ],
    )
    def test_not_matching(self, header):
        """Test values that do not match text/plain."""
        assert content_type_matches(header, "text/plain") is False


class TestResponsePipeline:
    """Tests for ResponsePipeline."""

    def test_empty_pipeline_passes_through(self):
        """Test that no steps means no change."""
        response = make_response()
        assert ResponsePipeline().apply(response) is response

    def test_fluent_chain(self):
        """Test building a pipeline with the fluent API."""
        pipeline = ResponsePipeline().is_http_response().validate_status_code(range(200, 300)).has_content_type("text/plain")
        assert [step.name for step in pipeline.steps] == ["is_http", "status_code", "content_type"]

        response = make_response(data=b"ok", headers={"Content-Type": "text/plain"})
        assert pipeline.apply(response) is response

    def test_failure_short_circuits(self):
        """Test that later steps do not run after a failure."""
        later = MagicMock()
        later.name = "later"
        later.check.side_effect = lambda response: response

        pipeline = ResponsePipeline().validate_status_code(range(200, 300)).add_step(later)

        with pytest.raises(HTTPFailureError):
            pipeline.apply(make_response(500))
        later.check.assert_not_called()

    def test_steps_run_in_order(self):
        """Test that each step receives the previous step's result."""
        calls = []
        first = MagicMock()
        first.check.side_effect = lambda response: calls.append("first") or response
        second = MagicMock()
        second.check.side_effect = lambda response: calls.append("second") or response

        ResponsePipeline(steps=[first, second]).apply(make_response())
        assert calls == ["first", "second"]

    def test_decoder_runs_last(self):
        """Test that the decoder transforms the validated response."""
        pipeline = ResponsePipeline().validate_status_code().decode(lambda response: response.data.decode())
        assert pipeline.apply(make_response(data=b"hello")) == "hello"

    def test_decoder_skipped_on_failure(self):
        """Test that the decoder does not run when validation fails."""
        decoder = MagicMock()
        pipeline = ResponsePipeline().validate_status_code().decode(decoder)
        with pytest.raises(HTTPFailureError):
            pipeline.apply(make_response(404))
        decoder.assert_not_called()

    def test_builtin_steps_satisfy_protocol(self):
        """Test that built-in steps implement ValidationStep."""
        assert isinstance(IsHTTPStep(), ValidationStep)
        assert isinstance(StatusCodeStep(), ValidationStep)
        assert isinstance(ContentTypeStep("text/plain"), ValidationStep)
