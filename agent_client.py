import base64
import io
import json
import os
import re
import time

from dotenv import load_dotenv
from google import genai
from google.genai import errors, types
from google.genai.types import Modality
from loguru import logger
from PIL import Image, UnidentifiedImageError

from history import now_ms, random_suffix
from system_prompt import IMAGE_BRIEF_PROMPT, IMAGE_RENDER_SUFFIX, PROMPT_ENHANCER_PROMPT

load_dotenv()

IMAGE_AGENT = "image"
PROMPT_AGENT = "prompt"

AGENT_NAMES = {
    IMAGE_AGENT: "Image Generation Agent",
    PROMPT_AGENT: "Prompt Enhancement Agent",
}

PROMPT_AGENT_MODEL = os.getenv("PROMPT_AGENT_MODEL", "gemini-2.5-flash")
IMAGE_AGENT_MODEL = os.getenv("IMAGE_AGENT_MODEL", "gemini-3.1-flash-image-preview")

THINKING_MODELS = {
    "gemini-3.1-pro-preview",
    "gemini-3-pro-preview",
    "gemini-3-flash-preview",
    "gemini-2.5-pro",
    "gemini-2.5-flash",
}

SIZE_PATTERN = re.compile(r"(\d+)\s*x\s*(\d+)")
FENCE_PATTERN = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$")

_client = None


def get_client():
    global _client
    if _client is None:
        _client = genai.Client(
            api_key=os.environ["GEMINI_API_KEY"],
            http_options=types.HttpOptions(timeout=300_000),
        )
    return _client


def new_session_id():
    return f"session-{now_ms()}-{random_suffix()}"


def build_config(model, instruction, json_output=False):
    kwargs = {"system_instruction": instruction}
    if json_output:
        kwargs["response_mime_type"] = "application/json"
    if model in THINKING_MODELS:
        kwargs["thinking_config"] = types.ThinkingConfig(thinking_level="low")
    return types.GenerateContentConfig(**kwargs)


def parse_size(size):
    """'Landscape (1792x1024)' -> (1792, 1024); None when there are no dimensions."""
    match = SIZE_PATTERN.search(size or "")
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def load_json(text):
    """Decode a JSON answer, tolerating a surrounding code fence. None if it isn't JSON."""
    if not text:
        return None
    text = text.strip()
    fenced = FENCE_PATTERN.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        return json.loads(text)
    except ValueError:
        return None


def fit_image(image_bytes, size=None):
    """Resize the generated image to the requested dimensions and re-encode as PNG."""
    img = Image.open(io.BytesIO(image_bytes))
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA")
    if size and img.size != size:
        img = img.resize(size, Image.LANCZOS)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue(), img.size


def response_parts(response):
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return getattr(content, "parts", None) or []


def run_image_agent(client, message, size=None):
    """Plan an enhanced prompt with the text model, then render it with the image model.

    Returns ``(result, message_text, raw_text)``; the result carries the
    five image fields under ``data``.
    """
    brief_response = client.models.generate_content(
        model=PROMPT_AGENT_MODEL,
        contents=message,
        config=build_config(PROMPT_AGENT_MODEL, IMAGE_BRIEF_PROMPT, json_output=True),
    )
    brief_text = brief_response.text or ""
    brief = load_json(brief_text)
    if not isinstance(brief, dict):
        logger.debug(f"Image brief was not a JSON object: {brief_text[:200]}")
        brief = {}

    render_prompt = brief.get("enhanced_prompt")
    if not render_prompt or not isinstance(render_prompt, str):
        render_prompt = message

    image_response = client.models.generate_content(
        model=IMAGE_AGENT_MODEL,
        contents=render_prompt + IMAGE_RENDER_SUFFIX,
        config=types.GenerateContentConfig(
            response_modalities=[Modality.TEXT, Modality.IMAGE],
            temperature=0,
        ),
    )

    image_url = ""
    notes = []
    rendered = None
    for part in response_parts(image_response):
        if part.text:
            notes.append(part.text)
        elif part.inline_data and not image_url:
            try:
                png_bytes, rendered = fit_image(part.inline_data.data, parse_size(size))
            except UnidentifiedImageError as e:
                logger.warning(f"Could not decode generated image, passing it through: {e}")
                b64 = base64.b64encode(part.inline_data.data).decode("utf-8")
                mime = part.inline_data.mime_type or "image/png"
                image_url = f"data:{mime};base64,{b64}"
                continue
            b64 = base64.b64encode(png_bytes).decode("utf-8")
            image_url = f"data:image/png;base64,{b64}"

    if not image_url:
        logger.warning("Image model did not return an image")

    metadata = [str(brief.get("generation_metadata") or "")]
    if rendered:
        metadata.append(f"{IMAGE_AGENT_MODEL}, {rendered[0]}x{rendered[1]} PNG")

    data = dict(brief)
    data["image_url"] = image_url
    data["generation_metadata"] = "; ".join(m for m in metadata if m)
    return {"data": data}, "\n".join(notes), brief_text


def run_prompt_agent(client, message):
    response = client.models.generate_content(
        model=PROMPT_AGENT_MODEL,
        contents=message,
        config=build_config(PROMPT_AGENT_MODEL, PROMPT_ENHANCER_PROMPT, json_output=True),
    )
    text = response.text or ""
    parsed = load_json(text)
    return (text if parsed is None else parsed), text, text


def call_agent(message, agent, session_id=None, size=None, client=None):
    """Send a composed instruction to one of the agents and return its envelope.

    Service-side failures come back as ``{"success": False, ...}``; anything
    else (network trouble, missing API key) is raised to the caller.
    """
    if agent not in AGENT_NAMES:
        raise ValueError(f"Unknown agent: {agent}")

    client = client or get_client()
    session_id = session_id or new_session_id()
    logger.info(f"Calling {AGENT_NAMES[agent]} for {session_id}")
    logger.debug(f"Agent message: {message}")

    start = time.time()
    try:
        if agent == IMAGE_AGENT:
            result, text, raw = run_image_agent(client, message, size=size)
        else:
            result, text, raw = run_prompt_agent(client, message)
    except errors.APIError as e:
        logger.error(f"{AGENT_NAMES[agent]} returned an error: {e}")
        return {
            "success": False,
            "error": str(e),
            "response": {"status": "error", "message": str(e)},
            "session_id": session_id,
        }

    elapsed = round(time.time() - start, 1)
    logger.info(f"{AGENT_NAMES[agent]} answered in {elapsed}s")
    return {
        "success": True,
        "response": {"status": "success", "result": result, "message": text},
        "raw_response": raw,
        "session_id": session_id,
        "elapsed": elapsed,
    }
