import asyncio
from unittest.mock import patch

import pytest

from resume_analyzer.models.models import DocumentKind, Transcript
from resume_analyzer.models.settings import LLMSettings, ProcessingSettings
from resume_analyzer.services.reasoning import ReasoningAdapter, parse_assessment
from resume_analyzer.utils.exceptions import MalformedUpstreamResponse, UpstreamServiceFailure


@pytest.fixture
def adapter():
    return ReasoningAdapter(llm=LLMSettings(), processing=ProcessingSettings())


def transcript(text):
    return Transcript(text=text, source_kind=DocumentKind.PDF)


class TestParseAssessment:
    """Test cases for parsing structured assessments"""

    def test_code_fenced_partial_assessment(self):
        assessment = parse_assessment('Sure! ```json\n{"atsScore":80}\n```')
        assert assessment.ats_score == 80
        assert assessment.present_fields() == {"atsScore": 80}
        assert assessment.fit_score is None
        assert assessment.skill_strength is None

    def test_full_assessment(self):
        raw = (
            'Here you go: {"atsScore": 72, "fitScore": 67, "skillStrength": {"react": 3}, '
            '"matchingSkills": ["react", "node"], "missingSkills": ["aws"]}'
        )
        assessment = parse_assessment(raw)
        assert assessment.present_fields() == {
            "atsScore": 72,
            "fitScore": 67,
            "skillStrength": {"react": 3},
            "matchingSkills": ["react", "node"],
            "missingSkills": ["aws"],
        }

    def test_no_json(self):
        with pytest.raises(MalformedUpstreamResponse) as exc_info:
            parse_assessment("I am unable to evaluate this resume.")
        assert "raw_response" in exc_info.value.details

    def test_invalid_json(self):
        with pytest.raises(MalformedUpstreamResponse):
            parse_assessment("{atsScore: 80,}")

    def test_out_of_range_score(self):
        with pytest.raises(MalformedUpstreamResponse):
            parse_assessment('{"atsScore": 150}')

    def test_stray_brace_in_prose(self):
        assessment = parse_assessment('Scores use the {0-100} scale.\n```json\n{"atsScore": 80}\n```')
        assert assessment.present_fields() == {"atsScore": 80}

    def test_negative_skill_count(self):
        with pytest.raises(MalformedUpstreamResponse):
            parse_assessment('{"skillStrength": {"react": -3}}')


class TestReasoningAdapter:
    """Test cases for prompting the reasoning service"""

    @patch("resume_analyzer.services.reasoning.chat_complete")
    def test_assess_bounds_excerpt_and_preserves_case(self, mock_complete, adapter):
        mock_complete.return_value = '{"atsScore": 80, "fitScore": 50}'
        text = "Python Expert " + "A" * 4000 + "OVERFLOW"

        assessment = asyncio.run(adapter.assess(transcript(text), "Needs AWS"))

        assert assessment.present_fields() == {"atsScore": 80, "fitScore": 50}
        messages = mock_complete.call_args.args[0]
        assert [m["role"] for m in messages] == ["system", "user"]
        prompt = messages[1]["content"]
        assert "Python Expert" in prompt
        assert "OVERFLOW" not in prompt
        assert "Needs AWS" in prompt

    @patch("resume_analyzer.services.reasoning.chat_complete")
    def test_assess_malformed_reply(self, mock_complete, adapter):
        mock_complete.return_value = "Sorry, no JSON today."
        with pytest.raises(MalformedUpstreamResponse):
            asyncio.run(adapter.assess(transcript("Python"), ""))

    @patch("resume_analyzer.services.reasoning.chat_complete")
    def test_upstream_failure_is_not_retried(self, mock_complete, adapter):
        mock_complete.side_effect = UpstreamServiceFailure("down")
        with pytest.raises(UpstreamServiceFailure):
            asyncio.run(adapter.assess(transcript("Python"), ""))
        assert mock_complete.call_count == 1

    @patch("resume_analyzer.services.reasoning.chat_complete")
    def test_interview_prep_is_verbatim(self, mock_complete, adapter):
        reply = "TECHNICAL QUESTIONS (5)\n- What is a closure?\n\n```not parsed```"
        mock_complete.return_value = reply
        text = "B" * 2500 + "CUTOFF"

        result = asyncio.run(adapter.interview_prep(transcript(text), "Frontend role"))

        assert result == reply
        prompt = mock_complete.call_args.args[0][1]["content"]
        assert "CUTOFF" not in prompt
        for heading in ("TECHNICAL QUESTIONS (5)", "BEHAVIORAL QUESTIONS (5)",
                        "SYSTEM DESIGN PROMPTS (3)", "CODING TOPICS (5)"):
            assert heading in prompt
        assert "Do NOT return JSON" in prompt
