import os
import threading
import time

from dotenv import load_dotenv
from flask import Flask, request, jsonify
from loguru import logger

from agent_client import IMAGE_AGENT, PROMPT_AGENT, call_agent
from history import (
    MAX_HISTORY,
    HistoryStore,
    enhance_sample_history,
    image_sample_history,
    make_entry,
)
from normalizer import normalize_enhancement_response, normalize_image_response
from pages import ENHANCE_PAGE, IMAGE_PAGE, render_page
from system_prompt import ENHANCE_REQUEST_TEMPLATE, IMAGE_REQUEST_TEMPLATE

load_dotenv()

app = Flask(__name__)

MAX_CHARS = 500

STYLES = [
    "Realistic",
    "Artistic",
    "Abstract",
    "Cyberpunk",
    "Fantasy",
    "Watercolor",
    "Oil Painting",
    "3D Render",
    "Anime",
    "Minimalist",
]

SIZES = [
    "Square (1024x1024)",
    "Landscape (1792x1024)",
    "Portrait (1024x1792)",
]

QUALITIES = ["Standard", "HD"]

DEFAULT_PARAMS = {"style": "Realistic", "size": "Square (1024x1024)", "quality": "HD"}

UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."
BUSY_ERROR = "A generation is already in progress. Please wait for it to finish."

HISTORY_DIR = os.getenv(
    "HISTORY_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
)

HISTORY_FILES = {
    "image": "image-gen-history-v2.json",
    "enhance": "prompt-enhance-history.json",
}


def create_stores(history_dir):
    return {
        "image": HistoryStore(
            os.path.join(history_dir, HISTORY_FILES["image"]), sample=image_sample_history
        ),
        "enhance": HistoryStore(
            os.path.join(history_dir, HISTORY_FILES["enhance"]), sample=enhance_sample_history
        ),
    }


stores = create_stores(HISTORY_DIR)

# One generation in flight at a time.
generation_lock = threading.Lock()


def page_options():
    return {
        "styles": STYLES,
        "sizes": SIZES,
        "qualities": QUALITIES,
        "defaults": DEFAULT_PARAMS,
        "max_chars": MAX_CHARS,
        "history_limit": MAX_HISTORY,
    }


def parse_generation_request(data):
    """Validate a generation request body.

    Returns ``(prompt, params, session_id)``; raises ValueError with a
    message fit for the user when the input is unusable.
    """
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")

    prompt = data.get("prompt") or ""
    if not isinstance(prompt, str):
        raise ValueError("Prompt must be text")
    prompt = prompt.strip()
    if not prompt:
        raise ValueError("Prompt cannot be empty")
    if len(prompt) > MAX_CHARS:
        raise ValueError(f"Prompt must be at most {MAX_CHARS} characters")

    params = {}
    for name, allowed in (("style", STYLES), ("size", SIZES), ("quality", QUALITIES)):
        value = data.get(name) or DEFAULT_PARAMS[name]
        if value not in allowed:
            raise ValueError(f"Unknown {name}: {value}")
        params[name] = value

    session_id = data.get("session_id")
    if not isinstance(session_id, str) or not session_id.strip():
        session_id = None
    return prompt, params, session_id


def agent_failure(envelope, fallback):
    """Error message for a failed envelope, or None when the call succeeded."""
    if not isinstance(envelope, dict):
        return fallback
    response = envelope.get("response")
    if not isinstance(response, dict):
        response = {}
    if envelope.get("success") and response.get("status") == "success":
        return None
    message = response.get("message") or envelope.get("error") or fallback
    return str(message)


def run_agent(message, agent, session_id, size=None):
    """Call the agent under the single-flight lock.

    Returns ``(envelope, elapsed, None)`` or ``(None, None, error_response)``.
    """
    if not generation_lock.acquire(blocking=False):
        logger.info("Rejected generation request while another one is running")
        return None, None, (jsonify({"error": BUSY_ERROR}), 409)

    try:
        start = time.time()
        envelope = call_agent(message, agent, session_id=session_id, size=size)
        elapsed = round(time.time() - start, 1)
        return envelope, elapsed, None
    except Exception:
        logger.exception(f"Agent call failed for {session_id}")
        return None, None, (jsonify({"error": UNEXPECTED_ERROR}), 500)
    finally:
        generation_lock.release()


@app.route("/")
def index():
    return render_page(IMAGE_PAGE, page_options())


@app.route("/enhance")
def enhance_page():
    return render_page(ENHANCE_PAGE, page_options())


@app.route("/api/generate", methods=["POST"])
def generate():
    try:
        prompt, params, session_id = parse_generation_request(request.get_json(silent=True))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    logger.info(f"Image generation requested ({params['style']}, {params['size']}, {params['quality']})")
    message = IMAGE_REQUEST_TEMPLATE.format(prompt=prompt, **params)
    envelope, elapsed, error = run_agent(message, IMAGE_AGENT, session_id, size=params["size"])
    if error:
        return error

    failure = agent_failure(envelope, "Failed to generate image. Please try again.")
    if failure:
        logger.warning(f"Image agent reported a failure: {failure}")
        return jsonify({"error": failure}), 502

    result = normalize_image_response(envelope, prompt).to_dict()
    if not result["image_url"]:
        logger.warning("Agent response did not contain an image URL")

    entry = stores["image"].append(make_entry(prompt, params, result))
    return jsonify({"result": result, "entry": entry, "elapsed": elapsed})


@app.route("/api/enhance", methods=["POST"])
def enhance():
    try:
        prompt, params, session_id = parse_generation_request(request.get_json(silent=True))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    logger.info(f"Prompt enhancement requested ({params['style']}, {params['size']}, {params['quality']})")
    message = ENHANCE_REQUEST_TEMPLATE.format(prompt=prompt, **params)
    envelope, elapsed, error = run_agent(message, PROMPT_AGENT, session_id)
    if error:
        return error

    failure = agent_failure(envelope, "Failed to enhance prompt. Please try again.")
    if failure:
        logger.warning(f"Prompt agent reported a failure: {failure}")
        return jsonify({"error": failure}), 502

    data, summary = normalize_enhancement_response(envelope, prompt)
    data = data.to_dict()
    entry = stores["enhance"].append(make_entry(prompt, params, data, summary=summary))
    return jsonify({"data": data, "summary": summary, "entry": entry, "elapsed": elapsed})


def history_payload(store):
    return {"history": store.entries, "sample_mode": store.sample_mode}


def unknown_variant(variant):
    return jsonify({"error": f"Unknown history: {variant}"}), 404


@app.route("/api/history/<variant>", methods=["GET"])
def get_history(variant):
    store = stores.get(variant)
    if store is None:
        return unknown_variant(variant)
    return jsonify(history_payload(store))


@app.route("/api/history/<variant>", methods=["DELETE"])
def clear_history(variant):
    store = stores.get(variant)
    if store is None:
        return unknown_variant(variant)
    store.clear()
    logger.info(f"Cleared {variant} history")
    return jsonify(history_payload(store))


@app.route("/api/history/<variant>/sample", methods=["POST"])
def toggle_sample(variant):
    store = stores.get(variant)
    if store is None:
        return unknown_variant(variant)
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    enabled = bool(data.get("enabled"))
    store.set_sample_mode(enabled)
    logger.info(f"Sample data {'on' if enabled else 'off'} for {variant} history")
    return jsonify(history_payload(store))


if __name__ == "__main__":
    app.run(debug=True, port=int(os.getenv("PORT", "5001")), threaded=True)
