"""Prompt composition, output validation and the OpenAI client."""

import asyncio
import json

import httpx
import pytest

from app.llm import openai_client
from app.llm.openai_client import OpenAIClient, OpenAIError
from app.llm.prompt_builder import build_job_info_prompt, build_prompt
from app.utils.latex_validation import validate_latex_output


def _mock_async_client(monkeypatch, handler):
    """Route every httpx.AsyncClient in the module through ``handler``."""
    real_client = httpx.AsyncClient

    def factory(*args, **kwargs):
        return real_client(transport=httpx.MockTransport(handler))

    monkeypatch.setattr(openai_client.httpx, "AsyncClient", factory)


def _completion(content):
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


class TestBuildPrompt:
    def test_placeholders_are_replaced(self):
        prompt = build_prompt("JD", "TPL", "Posting: {{JOB_DESCRIPTION}}\nResume: {{TEMPLATE}}")
        assert prompt == "Posting: JD\nResume: TPL"

    def test_every_occurrence_is_replaced(self):
        prompt = build_prompt("JD", "TPL", "{{JOB_DESCRIPTION}} and again {{JOB_DESCRIPTION}}")
        assert prompt == "JD and again JD"

    def test_single_placeholder(self):
        assert build_prompt("JD", "TPL", "Template only: {{TEMPLATE}}") == "Template only: TPL"

    def test_fallback_layout(self):
        prompt = build_prompt("JD", "TPL", "Make it shine.")
        assert prompt == (
            "Job posting Description:\n\nJD\n\n"
            "Candidate's latex resume template:\n\nTPL\n\n"
            "Make it shine."
        )

    def test_job_info_prompt_ends_with_posting(self):
        prompt = build_job_info_prompt("Senior engineer at Acme")
        assert "company, title, id" in prompt
        assert prompt.endswith("\n\nSenior engineer at Acme")


class TestValidateLatex:
    def test_valid(self):
        content = "x" * 200 + "\\section{Projects}\\section{Technical Skills}"
        result = validate_latex_output(content)

        assert result.valid
        assert result.errors == []

    def test_empty(self):
        result = validate_latex_output("")

        assert not result.valid
        assert result.errors == [
            "Output is too short or empty.",
            "Missing Projects section.",
            "Missing Technical Skills section.",
        ]

    def test_whitespace_does_not_count_toward_length(self):
        content = " " * 300 + "\\section{Projects}\\section{Technical Skills}" + " " * 300
        assert validate_latex_output(content).errors == ["Output is too short or empty."]

    def test_missing_one_section(self):
        content = "x" * 250 + "\\section{Projects}"
        assert validate_latex_output(content).errors == ["Missing Technical Skills section."]


class TestOpenAIClient:
    def test_requires_key(self):
        with pytest.raises(ValueError):
            OpenAIClient("")

    def test_generate_latex_request(self, monkeypatch):
        requests = []

        def handler(request):
            requests.append(request)
            return _completion("\\documentclass{article}")

        _mock_async_client(monkeypatch, handler)
        client = OpenAIClient("sk-test", model="gpt-4.1", base_url="https://llm.example.com/v1/")

        result = asyncio.run(client.generate_latex("PROMPT"))

        assert result == "\\documentclass{article}"
        sent = requests[0]
        assert str(sent.url) == "https://llm.example.com/v1/chat/completions"
        assert sent.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(sent.content)
        assert body["model"] == "gpt-4.1"
        assert body["temperature"] == 0.4
        assert body["messages"] == [{"role": "user", "content": "PROMPT"}]

    def test_http_error_raises(self, monkeypatch):
        _mock_async_client(monkeypatch, lambda request: httpx.Response(500, text="upstream down"))

        with pytest.raises(OpenAIError, match="500"):
            asyncio.run(OpenAIClient("sk-test").generate_latex("PROMPT"))

    def test_empty_choices(self, monkeypatch):
        _mock_async_client(monkeypatch, lambda request: httpx.Response(200, json={"choices": []}))
        assert asyncio.run(OpenAIClient("sk-test").generate_latex("PROMPT")) == ""

    def test_extract_job_info(self, monkeypatch):
        requests = []

        def handler(request):
            requests.append(json.loads(request.content))
            return _completion(json.dumps({"company": "Acme", "title": "Engineer", "id": 42}))

        _mock_async_client(monkeypatch, handler)

        info = asyncio.run(OpenAIClient("sk-test").extract_job_info("JD"))

        # Non-string values are dropped
        assert info == {"company": "Acme", "title": "Engineer", "id": ""}
        assert requests[0]["temperature"] == 0
        assert requests[0]["max_tokens"] == 200
        assert requests[0]["response_format"] == {"type": "json_object"}

    @pytest.mark.parametrize("response", [
        httpx.Response(500, text="boom"),
        httpx.Response(200, json={"choices": [{"message": {"content": "not json"}}]}),
        httpx.Response(200, json={"choices": [{"message": {"content": "[1, 2]"}}]}),
    ])
    def test_extract_job_info_never_raises(self, monkeypatch, response):
        _mock_async_client(monkeypatch, lambda request: response)

        info = asyncio.run(OpenAIClient("sk-test").extract_job_info("JD"))

        assert info == {"company": "", "title": "", "id": ""}

    def test_list_models(self, monkeypatch):
        def handler(request):
            assert request.url.path.endswith("/models")
            return httpx.Response(200, json={"data": [{"id": "gpt-4o-mini"}, {"id": "gpt-4.1"}]})

        _mock_async_client(monkeypatch, handler)

        assert asyncio.run(OpenAIClient("sk-test").list_models()) == ["gpt-4o-mini", "gpt-4.1"]

    def test_list_models_rejected(self, monkeypatch):
        _mock_async_client(monkeypatch, lambda request: httpx.Response(401, text="Incorrect API key"))

        with pytest.raises(OpenAIError, match="Incorrect API key"):
            asyncio.run(OpenAIClient("sk-test").list_models())
