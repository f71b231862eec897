import json

import app as app_module


def ok(result, message="", raw=""):
    return {
        "success": True,
        "response": {"status": "success", "result": result, "message": message},
        "raw_response": raw,
    }


def test_pages_render(client):
    for path, title in (("/", "AI Image Generator"), ("/enhance", "AI Prompt Enhancer")):
        res = client.get(path)
        assert res.status_code == 200
        html = res.get_data(as_text=True)
        assert title in html
        assert "/*__" not in html
        assert '"max_chars": 500' in html


def test_generate_image(client, agent, stores):
    agent["envelope"] = ok({"text": "image_url: http://a.com/i.png\nenhanced_prompt: a cat"})

    res = client.post("/api/generate", json={
        "prompt": "  a cat  ",
        "style": "Anime",
        "size": "Portrait (1024x1792)",
        "quality": "Standard",
        "session_id": "session-123-abc",
    })

    assert res.status_code == 200
    body = res.get_json()
    assert body["result"] == {
        "image_url": "http://a.com/i.png",
        "enhanced_prompt": "a cat",
        "original_prompt": "a cat",
        "style": "",
        "generation_metadata": "",
    }
    assert body["entry"]["prompt"] == "a cat"
    assert body["entry"]["quality"] == "Standard"

    call = agent["calls"][0]
    assert call["agent"] == app_module.IMAGE_AGENT
    assert call["session_id"] == "session-123-abc"
    assert call["size"] == "Portrait (1024x1792)"
    assert call["message"] == (
        "Generate an image with the following description. Style: Anime. "
        "Size: Portrait (1024x1792). Quality: Standard. Description: a cat"
    )
    assert stores["image"].entries == [body["entry"]]


def test_generate_uses_defaults(client, agent):
    agent["envelope"] = ok({"data": {"image_url": "https://x.io/a.png"}})
    res = client.post("/api/generate", json={"prompt": "boat"})
    assert res.status_code == 200
    entry = res.get_json()["entry"]
    assert (entry["style"], entry["size"], entry["quality"]) == ("Realistic", "Square (1024x1024)", "HD")
    assert agent["calls"][0]["session_id"] is None


def test_generate_without_image_url_still_succeeds(client, agent):
    agent["envelope"] = ok({"weird": True}, message="nothing useful")
    res = client.post("/api/generate", json={"prompt": "boat"})
    assert res.status_code == 200
    assert res.get_json()["result"]["image_url"] == ""


def test_generate_validation(client, agent):
    cases = [
        ({}, "Prompt cannot be empty"),
        ({"prompt": "   "}, "Prompt cannot be empty"),
        ({"prompt": "x" * 501}, "at most 500"),
        ({"prompt": "ok", "style": "Sketchy"}, "Unknown style"),
        ({"prompt": "ok", "size": "Huge"}, "Unknown size"),
        ({"prompt": "ok", "quality": "Ultra"}, "Unknown quality"),
    ]
    for payload, message in cases:
        res = client.post("/api/generate", json=payload)
        assert res.status_code == 400
        assert message in res.get_json()["error"]

    res = client.post("/api/generate", data="nope", content_type="text/plain")
    assert res.status_code == 400
    assert agent["calls"] == []


def test_generate_accepts_500_chars(client, agent):
    agent["envelope"] = ok({})
    res = client.post("/api/generate", json={"prompt": "y" * 500})
    assert res.status_code == 200


def test_generate_agent_failure_message(client, agent, stores):
    agent["envelope"] = {"success": False, "response": {"status": "error", "message": "quota exceeded"}}
    res = client.post("/api/generate", json={"prompt": "boat"})
    assert res.status_code == 502
    assert res.get_json()["error"] == "quota exceeded"
    assert stores["image"].entries == []


def test_generate_non_success_status_uses_error_field(client, agent):
    agent["envelope"] = {"success": True, "response": {"status": "pending"}, "error": "still working"}
    res = client.post("/api/generate", json={"prompt": "boat"})
    assert res.status_code == 502
    assert res.get_json()["error"] == "still working"


def test_generate_agent_failure_fallback_message(client, agent):
    agent["envelope"] = {"success": False}
    res = client.post("/api/generate", json={"prompt": "boat"})
    assert res.get_json()["error"] == "Failed to generate image. Please try again."


def test_generate_unexpected_error(client, agent, stores):
    agent["error"] = ConnectionError("socket closed")
    res = client.post("/api/generate", json={"prompt": "boat"})
    assert res.status_code == 500
    assert res.get_json()["error"] == app_module.UNEXPECTED_ERROR
    assert stores["image"].entries == []
    assert not app_module.generation_lock.locked()


def test_generate_rejects_concurrent_request(client, agent):
    agent["envelope"] = ok({})
    app_module.generation_lock.acquire()
    try:
        res = client.post("/api/generate", json={"prompt": "boat"})
    finally:
        app_module.generation_lock.release()
    assert res.status_code == 409
    assert agent["calls"] == []


def test_enhance(client, agent, stores):
    agent["envelope"] = ok({
        "summary": "added lighting",
        "data": {"enhanced_prompt": "a fox at dusk, rim light", "style_suggestion": "Watercolor"},
        "size_recommendation": "Landscape (1792x1024)",
    })

    res = client.post("/api/enhance", json={"prompt": "a fox", "style": "Watercolor"})

    assert res.status_code == 200
    body = res.get_json()
    assert body["summary"] == "added lighting"
    assert body["data"] == {
        "enhanced_prompt": "a fox at dusk, rim light",
        "style_suggestion": "Watercolor",
        "size_recommendation": "Landscape (1792x1024)",
        "quality_notes": "",
        "original_prompt": "a fox",
    }
    assert body["entry"]["summary"] == "added lighting"
    assert agent["calls"][0]["agent"] == app_module.PROMPT_AGENT
    assert "Prompt: a fox" in agent["calls"][0]["message"]
    assert stores["enhance"].entries == [body["entry"]]
    assert stores["image"].entries == []


def test_enhance_failure(client, agent):
    agent["envelope"] = {"success": False, "error": "bad key"}
    res = client.post("/api/enhance", json={"prompt": "a fox"})
    assert res.status_code == 502
    assert res.get_json()["error"] == "bad key"


def test_history_endpoints(client, agent, stores):
    agent["envelope"] = ok({"text": "image_url: http://a.com/1.png"})
    client.post("/api/generate", json={"prompt": "one"})
    client.post("/api/generate", json={"prompt": "two"})

    body = client.get("/api/history/image").get_json()
    assert body["sample_mode"] is False
    assert [e["prompt"] for e in body["history"]] == ["two", "one"]

    body = client.delete("/api/history/image").get_json()
    assert body["history"] == []
    assert client.get("/api/history/image").get_json()["history"] == []


def test_sample_toggle_restores_persisted_history(client, agent, stores):
    agent["envelope"] = ok({"text": "image_url: http://a.com/1.png"})
    client.post("/api/generate", json={"prompt": "mine"})
    persisted = client.get("/api/history/image").get_json()["history"]

    body = client.post("/api/history/image/sample", json={"enabled": True}).get_json()
    assert body["sample_mode"] is True
    assert [e["id"] for e in body["history"]] == ["sample-1", "sample-2"]

    body = client.post("/api/history/image/sample", json={"enabled": False}).get_json()
    assert body["sample_mode"] is False
    assert body["history"] == persisted

    with open(stores["image"].path, encoding="utf-8") as f:
        assert json.load(f) == persisted


def test_unknown_history_variant(client):
    assert client.get("/api/history/video").status_code == 404
    assert client.delete("/api/history/video").status_code == 404
    assert client.post("/api/history/video/sample", json={"enabled": True}).status_code == 404
