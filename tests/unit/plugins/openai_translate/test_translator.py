"""
Unit tests for OpenAI translation
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from plugins.openai_translate import OpenAITranslateIntegration
from plugins.openai_translate.config import OpenAITranslateConfiguration
from plugins.openai_translate.translator import OpenAITranslator
from runtime.errors import ConfigurationMissing

pytestmark = [pytest.mark.unit]

def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        side_effect=lambda model, messages: completion(f"[{model}] {messages[-1]['content']}")
    )
    return client

def test_configuration_uses_camel_case_keys():
    configuration = OpenAITranslateConfiguration.model_validate(
        {"apiKey": "sk-test", "apiUrl": "https://llm.acme.test/v1", "model": "gpt-test"}
    )

    assert configuration.api_key == "sk-test"
    assert configuration.api_url == "https://llm.acme.test/v1"
    assert configuration.model == "gpt-test"

def test_missing_api_key():
    with pytest.raises(ConfigurationMissing):
        OpenAITranslator(OpenAITranslateConfiguration())

@pytest.mark.asyncio
async def test_translate_preserves_order_and_skips_empty(openai_client):
    translator = OpenAITranslator(OpenAITranslateConfiguration(api_key="sk-test"), client=openai_client)

    result = await translator.translate(["Hello", "", "World"], "fr")

    assert result == ["[gpt-4o-mini] Hello", "", "[gpt-4o-mini] World"]
    assert openai_client.chat.completions.create.await_count == 2

@pytest.mark.asyncio
async def test_prompt_names_languages(openai_client):
    translator = OpenAITranslator(
        OpenAITranslateConfiguration(api_key="sk-test", model="gpt-test"),
        client=openai_client
    )

    await translator.translate_text("Hallo", "English", source_language="German")

    kwargs = openai_client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert "into English from German" in kwargs["messages"][0]["content"]

@pytest.mark.asyncio
async def test_integration_reads_installation_configuration(openai_client, make_context):
    context = make_context({
        "integration": {"name": "openai-translate"},
        "installation": {"id": "inst_1", "configuration": {"apiKey": "sk-test", "model": "gpt-custom"}},
    })

    result = await OpenAITranslateIntegration(client=openai_client).translate(["Hi"], "de", None, context)

    assert result == ["[gpt-custom] Hi"]
