"""Tests for image loading and vision extractors."""

import base64
import json

import httpx
import pytest

from card_digitizer.extractor.ollama import OllamaExtractor
from card_digitizer.extractor.openai import OpenAIExtractor
from card_digitizer.image import load_card_image

CARD_JSON = {
    "name": "Jane Doe",
    "title": "Director of Sales",
    "company": "Acme Corp",
    "phone": "(415) 555-0100",
    "email": "jane@acme.com",
    "website": "www.acme.com",
    "address": None,
    "industry": "Technology & Software",
    "notes": "",
}


def openai_transport(content, status_code=200, seen=None):
    """Mock OpenAI transport replying with the given message content."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if status_code != 200:
            return httpx.Response(status_code, text=content)
        return httpx.Response(
            200, json={"choices": [{"message": {"role": "assistant", "content": content}}]}
        )

    return httpx.MockTransport(handler)


def ollama_transport(response_text, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(200, json={"response": response_text, "done": True})

    return httpx.MockTransport(handler)


class TestLoadCardImage:
    """Test image loading."""

    def test_load_png(self, card_image):
        """Test an image is read and base64 encoded."""
        image = load_card_image(card_image)
        assert image.mime_type == "image/png"
        assert base64.b64decode(image.data) == card_image.read_bytes()
        assert image.data_url.startswith("data:image/png;base64,")

    def test_uppercase_extension(self, tmp_path):
        """Test extensions are matched case-insensitively."""
        path = tmp_path / "card.JPG"
        path.write_bytes(b"jpeg")
        assert load_card_image(path).mime_type == "image/jpeg"

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Image not found"):
            load_card_image(tmp_path / "missing.jpg")

    def test_unsupported_type(self, tmp_path):
        """Test a non-image extension is rejected."""
        path = tmp_path / "card.txt"
        path.write_text("not an image")
        with pytest.raises(ValueError, match="Unsupported image type"):
            load_card_image(path)

    def test_empty_file(self, tmp_path):
        """Test an empty image file is rejected."""
        path = tmp_path / "card.jpg"
        path.touch()
        with pytest.raises(ValueError, match="empty"):
            load_card_image(path)


class TestOpenAIExtractor:
    """Test OpenAIExtractor against a mocked API."""

    def test_requires_api_key(self):
        """Test a missing API key is rejected."""
        with pytest.raises(ValueError, match="OpenAI API key not configured"):
            OpenAIExtractor(api_key=None)

    def test_extractor_name(self):
        """Test the extractor name includes the model."""
        assert OpenAIExtractor(api_key="sk-test").name == "openai:gpt-4o-mini"
        assert OpenAIExtractor(api_key="sk-test", model="gpt-4o").name == "openai:gpt-4o"

    def test_extract_json_reply(self, card_image):
        """Test a JSON reply maps straight onto the record."""
        seen = []
        extractor = OpenAIExtractor(
            api_key="sk-test", transport=openai_transport(json.dumps(CARD_JSON), seen=seen)
        )
        result = extractor.extract(card_image)

        assert not result.used_fallback
        assert result.record.name == "Jane Doe"
        assert result.record.company == "Acme Corp"
        assert result.record.industry == "Technology & Software"
        assert result.record.address is None
        assert result.record.notes is None

        request = seen[0]
        assert request.url.path.endswith("/chat/completions")
        assert request.headers["Authorization"] == "Bearer sk-test"
        payload = json.loads(request.content)
        image_part = payload["messages"][1]["content"][1]
        assert image_part["image_url"]["url"].startswith("data:image/png;base64,")
        assert image_part["image_url"]["detail"] == "high"

    def test_extract_code_block_reply(self, card_image):
        """Test JSON inside a fenced code block is used."""
        reply = "Here you go:\n```json\n" + json.dumps({"name": "Jane  Doe "}) + "\n```"
        extractor = OpenAIExtractor(api_key="sk-test", transport=openai_transport(reply))
        result = extractor.extract(card_image)
        assert not result.used_fallback
        assert result.record.name == "Jane Doe"

    def test_fallback_on_plain_text(self, card_image):
        """Test a non-JSON reply is parsed heuristically."""
        reply = "Jane Doe\nDirector of Sales\nAcme Corp\njane@acme.com"
        extractor = OpenAIExtractor(api_key="sk-test", transport=openai_transport(reply))
        result = extractor.extract(card_image)

        assert result.used_fallback
        assert result.raw_text == reply
        assert result.record.name == "Jane Doe"
        assert result.record.title == "Director of Sales"
        assert result.record.email == "jane@acme.com"

    def test_fallback_on_json_array(self, card_image):
        """Test a JSON array is not a record."""
        extractor = OpenAIExtractor(api_key="sk-test", transport=openai_transport("[1, 2]"))
        assert extractor.extract(card_image).used_fallback

    def test_empty_reply_raises(self, card_image):
        """Test a blank reply raises ValueError."""
        extractor = OpenAIExtractor(api_key="sk-test", transport=openai_transport("  "))
        with pytest.raises(ValueError, match="empty response"):
            extractor.extract(card_image)

    def test_rate_limit_error(self, card_image):
        """Test a 429 reply gives the rate limit hint."""
        body = json.dumps({"error": {"code": "rate_limit_exceeded", "type": "rate_limit"}})
        extractor = OpenAIExtractor(
            api_key="sk-test", transport=openai_transport(body, status_code=429)
        )
        with pytest.raises(ValueError, match="Rate limit exceeded"):
            extractor.extract(card_image)

    def test_missing_image(self, tmp_path):
        """Test a missing image fails before any request."""
        extractor = OpenAIExtractor(api_key="sk-test", transport=openai_transport("{}"))
        with pytest.raises(FileNotFoundError):
            extractor.extract(tmp_path / "nope.jpg")


class TestOllamaExtractor:
    """Test OllamaExtractor against a mocked server."""

    def test_extractor_name(self):
        """Test the extractor name includes the model."""
        assert OllamaExtractor().name == "ollama:llava"
        assert OllamaExtractor(model="llama3.2-vision").name == "ollama:llama3.2-vision"

    def test_extract_sends_image(self, card_image):
        """Test the image is sent base64 encoded with JSON format."""
        seen = []
        extractor = OllamaExtractor(transport=ollama_transport(json.dumps(CARD_JSON), seen=seen))
        result = extractor.extract(card_image)

        assert result.record.email == "jane@acme.com"
        payload = json.loads(seen[0].content)
        assert seen[0].url.path == "/api/generate"
        assert payload["format"] == "json"
        assert payload["stream"] is False
        assert base64.b64decode(payload["images"][0]) == card_image.read_bytes()

    def test_connect_error(self, card_image):
        """Test a refused connection asks whether Ollama is running."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        extractor = OllamaExtractor(transport=httpx.MockTransport(handler))
        with pytest.raises(ValueError, match="Is Ollama running"):
            extractor.extract(card_image)

    def test_timeout(self, card_image):
        """Test a slow model surfaces as a ValueError."""

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        extractor = OllamaExtractor(timeout=5, transport=httpx.MockTransport(handler))
        with pytest.raises(ValueError, match="Ollama request timed out after 5s"):
            extractor.extract(card_image)


class TestResponseParsing:
    """Test the shared reply handling."""

    def test_industry_label_kept(self):
        """Test a label in any case maps to the canonical label."""
        extractor = OllamaExtractor()
        result = extractor._parse_response(json.dumps({"industry": "healthcare & pharmaceutical"}))
        assert result.record.industry == "Healthcare & Pharmaceutical"

    def test_industry_mapped_by_keyword(self):
        """Test an unknown industry is mapped through keywords."""
        extractor = OllamaExtractor()
        result = extractor._parse_response(json.dumps({"industry": "Fintech"}))
        assert result.record.industry == "Technology & Software"

    def test_unknown_industry_dropped(self):
        """Test an unmappable industry is dropped."""
        extractor = OllamaExtractor()
        result = extractor._parse_response(json.dumps({"industry": "Space"}))
        assert result.record.industry is None

    def test_list_and_number_values(self):
        """Test lists give their first element and numbers become strings."""
        extractor = OllamaExtractor()
        result = extractor._parse_response(
            json.dumps({"email": ["a@x.com", "b@x.com"], "phone": 5550100, "notes": []})
        )
        assert result.record.email == "a@x.com"
        assert result.record.phone == "5550100"
        assert result.record.notes is None

    def test_nested_object_values(self):
        """Test an object value gives its first value, not a dict repr."""
        extractor = OllamaExtractor()
        result = extractor._parse_response(
            json.dumps({"phone": {"mobile": "+65 9833 2268", "office": "6123 4567"}, "notes": {}})
        )
        assert result.record.phone == "+65 9833 2268"
        assert result.record.notes is None

    def test_plain_text_reply_parsed(self):
        """Test a plain text reply goes through the heuristic parser."""
        extractor = OpenAIExtractor(api_key="sk-test")
        result = extractor._parse_response("Jane Doe\nAcme Corp")
        assert result.used_fallback
        assert result.record.name == "Jane Doe"
        assert result.record.company == "Acme Corp"
        assert result.record.title is None

    def test_extract_json_from_code_block(self):
        """Test JSON extraction from a code block."""
        extractor = OllamaExtractor()
        assert extractor._extract_json('```json\n{"name": "Test"}\n```') == '{"name": "Test"}'

    def test_extract_json_raw(self):
        """Test JSON extraction from surrounding text."""
        extractor = OllamaExtractor()
        assert extractor._extract_json('Some text {"name": "Test"} more') == '{"name": "Test"}'
