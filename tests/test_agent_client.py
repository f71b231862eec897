import base64
import io
import json
from types import SimpleNamespace

import pytest
from google.genai import errors
from PIL import Image

import agent_client
from agent_client import IMAGE_AGENT, PROMPT_AGENT, call_agent, load_json, parse_size


class FakeModels:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def fake_client(*responses):
    return SimpleNamespace(models=FakeModels(*responses))


def text_response(text):
    return SimpleNamespace(text=text, candidates=[])


def png_bytes(size=(8, 6)):
    buf = io.BytesIO()
    Image.new("RGB", size, (200, 40, 40)).save(buf, format="PNG")
    return buf.getvalue()


def image_response(data, text="Here you go"):
    parts = [
        SimpleNamespace(text=text, inline_data=None),
        SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type="image/png")),
    ]
    content = SimpleNamespace(parts=parts)
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=content)])


def test_parse_size():
    assert parse_size("Landscape (1792x1024)") == (1792, 1024)
    assert parse_size("Square") is None
    assert parse_size(None) is None


def test_load_json_strips_code_fence():
    assert load_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert load_json("not json") is None
    assert load_json("") is None


def test_prompt_agent_envelope():
    answer = {"summary": "tightened", "data": {"enhanced_prompt": "a sharper fox"}}
    client = fake_client(text_response(json.dumps(answer)))

    envelope = call_agent("Enhance this", PROMPT_AGENT, session_id="session-1", client=client)

    assert envelope["success"] is True
    assert envelope["session_id"] == "session-1"
    assert envelope["response"]["status"] == "success"
    assert envelope["response"]["result"] == answer
    assert envelope["raw_response"] == json.dumps(answer)
    call = client.models.calls[0]
    assert call["model"] == agent_client.PROMPT_AGENT_MODEL
    assert call["contents"] == "Enhance this"


def test_prompt_agent_passes_through_non_json():
    client = fake_client(text_response("just some words"))
    envelope = call_agent("Enhance this", PROMPT_AGENT, client=client)
    assert envelope["response"]["result"] == "just some words"
    assert envelope["session_id"].startswith("session-")


def test_image_agent_two_steps():
    brief = {
        "enhanced_prompt": "a red square, studio light",
        "original_prompt": "red square",
        "style": "flat",
        "generation_metadata": "kept it simple",
    }
    client = fake_client(text_response(json.dumps(brief)), image_response(png_bytes()))

    envelope = call_agent(
        "Generate an image", IMAGE_AGENT, session_id="s", size="Landscape (1792x1024)", client=client
    )

    assert envelope["success"] is True
    data = envelope["response"]["result"]["data"]
    assert data["enhanced_prompt"] == "a red square, studio light"
    assert data["image_url"].startswith("data:image/png;base64,")
    assert data["generation_metadata"].startswith("kept it simple; ")
    assert "1792x1024" in data["generation_metadata"]
    assert envelope["response"]["message"] == "Here you go"

    decoded = base64.b64decode(data["image_url"].split(",", 1)[1])
    assert Image.open(io.BytesIO(decoded)).size == (1792, 1024)

    render_call = client.models.calls[1]
    assert render_call["model"] == agent_client.IMAGE_AGENT_MODEL
    assert render_call["contents"].startswith("a red square, studio light")


def test_image_agent_without_brief_uses_message():
    client = fake_client(text_response("garbled"), image_response(png_bytes(), text=None))
    envelope = call_agent("Generate a boat", IMAGE_AGENT, client=client)
    assert client.models.calls[1]["contents"].startswith("Generate a boat")
    assert envelope["response"]["result"]["data"]["image_url"]


def test_image_agent_without_image():
    client = fake_client(
        text_response('{"enhanced_prompt": "a boat"}'),
        SimpleNamespace(text="sorry", candidates=None),
    )
    envelope = call_agent("Generate a boat", IMAGE_AGENT, client=client)
    data = envelope["response"]["result"]["data"]
    assert envelope["success"] is True
    assert data["image_url"] == ""
    assert data["enhanced_prompt"] == "a boat"


def test_api_error_becomes_failure_envelope():
    error = errors.APIError(
        429, {"error": {"code": 429, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"}}
    )
    client = fake_client(error)

    envelope = call_agent("Enhance", PROMPT_AGENT, client=client)

    assert envelope["success"] is False
    assert envelope["response"]["status"] == "error"
    assert "Resource exhausted" in envelope["response"]["message"]


def test_other_errors_propagate():
    client = fake_client(ConnectionError("offline"))
    with pytest.raises(ConnectionError):
        call_agent("Enhance", PROMPT_AGENT, client=client)


def test_unknown_agent():
    with pytest.raises(ValueError):
        call_agent("hi", "video", client=fake_client())


def test_undecodable_image_is_passed_through():
    parts = [
        SimpleNamespace(text=None, inline_data=SimpleNamespace(data=b"not an image", mime_type="image/webp")),
    ]
    broken = SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])
    brief = {"enhanced_prompt": "a kite", "generation_metadata": "windy"}
    client = fake_client(text_response(json.dumps(brief)), broken)

    envelope = call_agent("Generate a kite", IMAGE_AGENT, size="Square (1024x1024)", client=client)

    assert envelope["success"] is True
    data = envelope["response"]["result"]["data"]
    expected = base64.b64encode(b"not an image").decode("utf-8")
    assert data["image_url"] == f"data:image/webp;base64,{expected}"
    assert data["enhanced_prompt"] == "a kite"
    assert data["generation_metadata"] == "windy"
