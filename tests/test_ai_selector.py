import json

import pytest

from stockflow.core import ai_selector
from stockflow.core.ai_selector import AIServiceError


class FakeGenai:
    """Stand-in for the google.generativeai module"""

    def __init__(self):
        self.reply = ""
        self.error = None
        self.calls = []
        self.api_key = None

    def configure(self, api_key):
        self.api_key = api_key

    def GenerativeModel(self, name):
        fake = self

        class _Model:
            def generate_content(self, contents, generation_config=None):
                fake.calls.append({"model": name, "contents": contents, "config": generation_config})
                if fake.error:
                    raise fake.error
                return type("Response", (), {"text": fake.reply})()

        return _Model()


@pytest.fixture
def genai(monkeypatch):
    fake = FakeGenai()
    monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
    monkeypatch.setattr(ai_selector, "genai", fake)
    return fake


def test_missing_api_key(genai, monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY")
    with pytest.raises(AIServiceError, match="GOOGLE_API_KEY"):
        ai_selector.parse_stock_text("C1 Celcom 011 5")
    assert genai.calls == []


def test_parse_stock_text(genai):
    genai.reply = json.dumps([{"code": "C1", "provider": "Celcom", "phone_number": "011", "amount": 5}])

    rows = ai_selector.parse_stock_text("C1 Celcom 011 5")

    assert rows[0]["code"] == "C1"
    assert genai.api_key == "test-key"
    call = genai.calls[0]
    assert call["config"]["response_mime_type"] == "application/json"
    assert call["config"]["response_schema"] is ai_selector.STOCK_ROWS_SCHEMA
    assert "C1 Celcom 011 5" in call["contents"]


def test_code_fenced_json_is_accepted(genai):
    genai.reply = "```json\n[{\"code\": \"C2\", \"phone_number\": \"\", \"amount\": 0}]\n```"
    assert ai_selector.parse_stock_text("x")[0]["code"] == "C2"


def test_empty_reply_gives_no_rows(genai):
    genai.reply = ""
    assert ai_selector.parse_stock_text("x") == []


def test_malformed_json(genai):
    genai.reply = "[{not json"
    with pytest.raises(AIServiceError, match="malformed"):
        ai_selector.parse_stock_text("x")


def test_api_failure_is_wrapped(genai):
    genai.error = RuntimeError("quota exceeded")
    with pytest.raises(AIServiceError, match="quota exceeded"):
        ai_selector.parse_stock_text("x")


def test_insights_sample_and_fallback(genai):
    genai.reply = "Stock is accumulating."
    records = [{"code": f"C{i}", "type": "IN", "amount": i} for i in range(60)]

    assert ai_selector.generate_data_insights(records) == "Stock is accumulating."
    prompt = genai.calls[0]["contents"]
    assert "showing 50 of 60 items" in prompt
    assert '"C49"' in prompt
    assert '"C50"' not in prompt

    genai.error = RuntimeError("boom")
    assert ai_selector.generate_data_insights(records) == ai_selector.INSIGHT_FALLBACK


def test_generate_schedule_without_employees(genai):
    assert ai_selector.generate_staff_schedule([], "2025-12") == []
    assert genai.calls == []


def test_generate_schedule(genai):
    genai.reply = json.dumps([
        {"day": "2025-12-01", "assignments": [{"employee_id": "a", "employee_name": "Alice", "shift": "Morning"}]},
    ])
    employees = [{
        "id": "a",
        "name": "Alice",
        "primary_shift": "Morning",
        "requests": [{"day": "2025-12-24", "shift": "OFF"}],
    }]

    result = ai_selector.generate_staff_schedule(employees, "2025-12")

    assert result[0]["day"] == "2025-12-01"
    prompt = genai.calls[0]["contents"]
    assert "Total 31 days" in prompt
    assert "OFF on 2025-12-24" in prompt
    assert genai.calls[0]["config"]["response_schema"] is ai_selector.SCHEDULE_SCHEMA


def test_parse_schedule_image(genai):
    genai.reply = json.dumps({
        "employees": ["Alice"],
        "flat_assignments": [{"date": "2025-12-01", "employee_name": "Alice", "shift": "Morning"}],
    })

    result = ai_selector.parse_schedule_image(b"img-bytes", "image/png")

    assert result["employees"] == ["Alice"]
    prompt, image = genai.calls[0]["contents"]
    assert "STAFF SCHEDULE" in prompt
    assert image == {"mime_type": "image/png", "data": b"img-bytes"}


def test_parse_schedule_image_empty(genai):
    genai.reply = "{}"
    with pytest.raises(AIServiceError):
        ai_selector.parse_schedule_image(b"img", "image/jpeg")
