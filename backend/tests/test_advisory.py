"""
Tests unitaires — AdvisoryService (clients LLM mockés).
"""

import json
import pytest
from unittest.mock import MagicMock, patch

from langchain_core.messages import HumanMessage, SystemMessage

from agrismart.services.advisory import AdvisoryService, AdvisoryServiceError
from agrismart.services.llm_clients import LLMNotConfiguredError


def _completion(content):
    completion = MagicMock()
    completion.choices = [MagicMock()]
    completion.choices[0].message.content = content
    return completion


DIAGNOSIS = {
    "plantName": "Tomato",
    "healthStatus": "Pest Infestation",
    "diagnosis": "Aphids on young leaves",
    "treatment": ["Spray neem oil", "Introduce ladybugs"],
    "urgency": "High",
}


class TestAdvice:

    def test_returns_model_text(self):
        chat = MagicMock()
        chat.invoke.return_value = MagicMock(content="Rotate your beds every season.")
        service = AdvisoryService(chat_client=chat)

        text = service.get_advice("How do I keep soil healthy?", {"crops": [{"name": "Corn"}]})
        assert text == "Rotate your beds every season."

        messages = chat.invoke.call_args[0][0]
        assert isinstance(messages[0], SystemMessage)
        assert "AgriSmart AI" in messages[0].content
        assert isinstance(messages[1], HumanMessage)
        assert "How do I keep soil healthy?" in messages[1].content
        assert '"name": "Corn"' in messages[1].content

    def test_query_is_sanitized(self):
        chat = MagicMock()
        chat.invoke.return_value = MagicMock(content="ok")
        AdvisoryService(chat_client=chat).get_advice("  pests\x00?  ")
        assert "pests?" in chat.invoke.call_args[0][0][1].content

    def test_empty_query_is_a_validation_error(self):
        chat = MagicMock()
        with pytest.raises(ValueError):
            AdvisoryService(chat_client=chat).get_advice("\x01  ")
        chat.invoke.assert_not_called()

    def test_model_failure_is_wrapped(self):
        chat = MagicMock()
        chat.invoke.side_effect = TimeoutError("read timeout")
        with pytest.raises(AdvisoryServiceError):
            AdvisoryService(chat_client=chat).get_advice("Help")

    def test_empty_answer_is_an_error(self):
        chat = MagicMock()
        chat.invoke.return_value = MagicMock(content="   ")
        with pytest.raises(AdvisoryServiceError):
            AdvisoryService(chat_client=chat).get_advice("Help")

    def test_missing_configuration_is_wrapped(self):
        with patch(
            "agrismart.services.advisory.get_chat_client",
            side_effect=LLMNotConfiguredError("LLM API key is not set."),
        ):
            with pytest.raises(AdvisoryServiceError):
                AdvisoryService().get_advice("Help")


class TestDiagnosis:

    def test_parses_json_diagnosis(self):
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = _completion(json.dumps(DIAGNOSIS))
        service = AdvisoryService(sdk_client=sdk)

        result = service.diagnose_image(b"\x89PNG-bytes", mime_type="image/png")
        assert result.plant_name == "Tomato"
        assert result.treatment == ["Spray neem oil", "Introduce ladybugs"]
        assert result.model_dump(by_alias=True) == DIAGNOSIS

        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        parts = kwargs["messages"][0]["content"]
        assert parts[0]["type"] == "text"
        assert '"plantName"' in parts[0]["text"]
        assert parts[1]["image_url"]["url"].startswith("data:image/png;base64,")

    def test_empty_image_is_a_validation_error(self):
        with pytest.raises(ValueError):
            AdvisoryService(sdk_client=MagicMock()).diagnose_image(b"")

    def test_invalid_json_is_wrapped(self):
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = _completion("I think it is a tomato.")
        with pytest.raises(AdvisoryServiceError):
            AdvisoryService(sdk_client=sdk).diagnose_image(b"img")

    def test_incomplete_payload_is_wrapped(self):
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = _completion(json.dumps({"plantName": "Rose"}))
        with pytest.raises(AdvisoryServiceError):
            AdvisoryService(sdk_client=sdk).diagnose_image(b"img")


class TestMarketTrends:

    TRENDS = [
        {"crop": "Wheat", "priceTrend": "Rising", "currentPrice": "$6.10/bu", "outlook": "Tight supply"},
        {"crop": "Rice", "priceTrend": "Stable", "currentPrice": "$17/cwt", "outlook": "Steady"},
    ]

    def test_object_payload(self):
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = _completion(json.dumps({"trends": self.TRENDS}))
        trends = AdvisoryService(sdk_client=sdk).get_market_trends()
        assert [t.crop for t in trends] == ["Wheat", "Rice"]
        assert trends[0].price_trend == "Rising"

        prompt = sdk.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        for crop in ("Wheat", "Rice", "Corn", "Soybeans"):
            assert crop in prompt

    def test_bare_list_payload(self):
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = _completion(json.dumps(self.TRENDS))
        assert len(AdvisoryService(sdk_client=sdk).get_market_trends()) == 2

    def test_object_without_trends_key_is_an_error(self):
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = _completion(json.dumps({"markets": self.TRENDS}))
        with pytest.raises(AdvisoryServiceError):
            AdvisoryService(sdk_client=sdk).get_market_trends()

    def test_network_failure_is_wrapped(self):
        sdk = MagicMock()
        sdk.chat.completions.create.side_effect = ConnectionError("unreachable")
        with pytest.raises(AdvisoryServiceError):
            AdvisoryService(sdk_client=sdk).get_market_trends()

    def test_empty_content_is_an_error(self):
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = _completion(None)
        with pytest.raises(AdvisoryServiceError):
            AdvisoryService(sdk_client=sdk).get_market_trends()
