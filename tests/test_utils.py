from unittest.mock import MagicMock, patch

import pytest
import requests

from resume_analyzer.models.settings import LLMSettings
from resume_analyzer.utils.exceptions import MalformedUpstreamResponse, UpstreamServiceFailure
from resume_analyzer.utils.utils import chat_complete, find_json_span, parse_json_object

MESSAGES = [{"role": "user", "content": "hi"}]


def ok_response(payload):
    resp = MagicMock()
    resp.raise_for_status.return_value = None
    resp.json.return_value = payload
    resp.text = str(payload)
    return resp


class TestJsonSpan:
    """Test cases for locating JSON in free-form replies"""

    def test_code_fenced_reply(self):
        assert find_json_span('Sure! ```json\n{"atsScore":80}\n```') == '{"atsScore":80}'

    def test_nested_objects(self):
        text = 'Result: {"a": {"b": {"c": 1}}, "d": 2} -- done {"other": true}'
        assert find_json_span(text) == '{"a": {"b": {"c": 1}}, "d": 2}'

    def test_braces_inside_strings(self):
        text = 'x {"note": "use } and { freely", "q": "say \\"}\\""} y'
        assert find_json_span(text) == '{"note": "use } and { freely", "q": "say \\"}\\""}'

    def test_no_object(self):
        assert find_json_span("I cannot help with that.") is None
        assert find_json_span("") is None
        assert find_json_span(None) is None

    def test_unbalanced(self):
        assert find_json_span('{"atsScore": 80') is None

    def test_stray_brace_before_fenced_object(self):
        text = 'Scores use the {0-100} scale.\n```json\n{"atsScore": 80}\n```'
        assert find_json_span(text) == '{"atsScore": 80}'

    def test_unclosed_brace_before_object(self):
        assert find_json_span('Range {low to high. {"fitScore": 40}') == '{"fitScore": 40}'

    def test_invalid_span_returned_when_nothing_decodes(self):
        assert find_json_span("see {not json} here") == "{not json}"


class TestParseJsonObject:
    """Test cases for the typed JSON parse result"""

    def test_success(self):
        result = parse_json_object('{"atsScore": 80}')
        assert result.ok
        assert result.data == {"atsScore": 80}

    def test_missing_span(self):
        result = parse_json_object(None)
        assert not result.ok
        assert "no JSON" in result.error

    def test_invalid_json(self):
        result = parse_json_object("{atsScore: eighty}")
        assert not result.ok
        assert result.error.startswith("invalid JSON")


class TestChatComplete:
    """Test cases for the reasoning-service transport"""

    def setup_method(self):
        self.settings = LLMSettings(api_key="sk-test", base_url="https://llm.example/api/v1/", timeout=5)

    @patch("resume_analyzer.utils.utils.requests.post")
    def test_returns_first_message(self, mock_post):
        mock_post.return_value = ok_response({"choices": [{"message": {"content": "hello"}}]})

        assert chat_complete(MESSAGES, self.settings) == "hello"

        args, kwargs = mock_post.call_args
        assert args[0] == "https://llm.example/api/v1/chat/completions"
        assert kwargs["json"] == {"model": "openai/gpt-4o-mini", "messages": MESSAGES, "temperature": 0.3}
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert kwargs["timeout"] == 5

    @patch("resume_analyzer.utils.utils.requests.post")
    def test_timeout(self, mock_post):
        mock_post.side_effect = requests.Timeout("slow")
        with pytest.raises(UpstreamServiceFailure) as exc_info:
            chat_complete(MESSAGES, self.settings)
        assert "timed out" in exc_info.value.message
        assert mock_post.call_count == 1

    @patch("resume_analyzer.utils.utils.requests.post")
    def test_http_error(self, mock_post):
        resp = MagicMock()
        resp.raise_for_status.side_effect = requests.HTTPError(response=MagicMock(status_code=503))
        mock_post.return_value = resp
        with pytest.raises(UpstreamServiceFailure) as exc_info:
            chat_complete(MESSAGES, self.settings)
        assert exc_info.value.details["status_code"] == 503

    @patch("resume_analyzer.utils.utils.requests.post")
    def test_connection_error(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(UpstreamServiceFailure):
            chat_complete(MESSAGES, self.settings)

    @patch("resume_analyzer.utils.utils.requests.post")
    def test_unexpected_shape(self, mock_post):
        mock_post.return_value = ok_response({"error": {"message": "quota"}})
        with pytest.raises(MalformedUpstreamResponse):
            chat_complete(MESSAGES, self.settings)
