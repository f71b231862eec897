"""Turn whatever the agent sends back into fixed-field result records.

The agent is free to answer with plain ``key: value`` text, a JSON object
with the fields at the top level or nested under ``data``/``message``, or
something else entirely. Every function here is pure and never raises; a
shape nobody recognises simply yields empty strings.
"""

import json
import re
from dataclasses import asdict, dataclass, fields

IMAGE_URL_PATTERN = re.compile(
    r"https?://[^\s\"',}]+\.(?:png|jpg|jpeg|gif|webp)", re.IGNORECASE
)


@dataclass
class ImageResult:
    image_url: str = ""
    enhanced_prompt: str = ""
    original_prompt: str = ""
    style: str = ""
    generation_metadata: str = ""

    def to_dict(self):
        return asdict(self)


@dataclass
class EnhancementResult:
    enhanced_prompt: str = ""
    style_suggestion: str = ""
    size_recommendation: str = ""
    quality_notes: str = ""
    original_prompt: str = ""

    def to_dict(self):
        return asdict(self)


IMAGE_FIELDS = tuple(f.name for f in fields(ImageResult))
ENHANCEMENT_FIELDS = tuple(f.name for f in fields(EnhancementResult))


def _text(value) -> str:
    if isinstance(value, str):
        return value
    if not value:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def _get(obj, key):
    return obj.get(key) if isinstance(obj, dict) else None


def _truthy(value):
    # Empty objects and lists still count as present.
    return isinstance(value, (dict, list)) or bool(value)


def _read_fields(source) -> ImageResult:
    return ImageResult(**{name: _text(_get(source, name)) for name in IMAGE_FIELDS})


def parse_key_value_text(text) -> ImageResult:
    """Parse ``key: value`` lines into an ImageResult.

    Keys are matched case-insensitively with whitespace runs folded to
    underscores, so ``Image URL: ...`` fills ``image_url``. Unknown keys and
    lines without a colon are skipped.
    """
    result = ImageResult()
    if not text or not isinstance(text, str):
        return result

    for line in text.split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = re.sub(r"\s+", "_", key.strip().lower())
        if key in IMAGE_FIELDS:
            setattr(result, key, value.strip())
    return result


# Each strategy returns an ImageResult when it recognises the shape, or None
# to let the next one try. Order matters.

def _from_text_field(raw):
    text = _get(raw, "text")
    if text and isinstance(text, str):
        return parse_key_value_text(text)
    return None


def _from_message_field(raw):
    message = _get(raw, "message")
    if message and isinstance(message, str):
        parsed = parse_key_value_text(message)
        if parsed.image_url:
            return parsed
    return None


def _from_data_field(raw):
    data = _get(raw, "data")
    if _truthy(data):
        return _read_fields(data)
    return None


def _from_top_level(raw):
    if _truthy(_get(raw, "image_url")):
        return _read_fields(raw)
    return None


def _from_plain_string(raw):
    if isinstance(raw, str):
        return parse_key_value_text(raw)
    return None


def _from_embedded_url(raw):
    dumped = json.dumps(raw if _truthy(raw) else {}, default=str, ensure_ascii=False)
    match = IMAGE_URL_PATTERN.search(dumped)
    if not match:
        return None
    return ImageResult(
        image_url=match.group(0),
        enhanced_prompt=_text(_get(raw, "enhanced_prompt") or _get(raw, "summary")),
        original_prompt=_text(_get(raw, "original_prompt")),
        style=_text(_get(raw, "style")),
    )


IMAGE_STRATEGIES = (
    _from_text_field,
    _from_message_field,
    _from_data_field,
    _from_top_level,
    _from_plain_string,
    _from_embedded_url,
)


def extract_image_result(raw) -> ImageResult:
    for strategy in IMAGE_STRATEGIES:
        result = strategy(raw)
        if result is not None:
            return result
    return ImageResult()


def normalize_image_response(envelope, prompt="") -> ImageResult:
    """Build the image result for a successful agent envelope.

    ``response.result`` goes through the strategy chain first. If that left
    ``image_url`` empty, ``response.message`` and then ``raw_response`` are
    parsed as key-value text; a hit there only fills fields that are still
    empty, except ``image_url`` which it sets.
    """
    response = _get(envelope, "response")
    result = extract_image_result(_get(response, "result"))

    for fallback in (_get(response, "message"), _get(envelope, "raw_response")):
        if result.image_url:
            break
        if not fallback or not isinstance(fallback, str):
            continue
        parsed = parse_key_value_text(fallback)
        if parsed.image_url:
            result.image_url = parsed.image_url
            result.enhanced_prompt = result.enhanced_prompt or parsed.enhanced_prompt
            result.style = result.style or parsed.style

    if not result.original_prompt:
        result.original_prompt = (prompt or "").strip()
    return result


def extract_image_data(raw):
    """Return ``(EnhancementResult, summary)`` for a prompt-enhancement answer."""
    data = _get(raw, "data")
    values = {}
    for name in ENHANCEMENT_FIELDS:
        values[name] = _text(_get(data, name) or _get(raw, name))
    return EnhancementResult(**values), _text(_get(raw, "summary"))


def normalize_enhancement_response(envelope, prompt=""):
    data, summary = extract_image_data(_get(_get(envelope, "response"), "result"))
    if not data.original_prompt:
        data.original_prompt = (prompt or "").strip()
    return data, summary
