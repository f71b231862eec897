import json
import os
import random
import string
import threading
import time

from loguru import logger

MAX_HISTORY = 50

_SUFFIX_CHARS = string.ascii_lowercase + string.digits


def now_ms():
    return int(time.time() * 1000)


def random_suffix(length=7):
    return "".join(random.choice(_SUFFIX_CHARS) for _ in range(length))


def make_entry(prompt, params, result, **extra):
    """Build a new history entry. Entries are never edited after this."""
    stamp = now_ms()
    entry = {
        "id": f"gen-{stamp}-{random_suffix()}",
        "prompt": prompt,
        "style": params["style"],
        "size": params["size"],
        "quality": params["quality"],
        "result": result,
        "timestamp": stamp,
    }
    entry.update(extra)
    return entry


def image_sample_history():
    stamp = now_ms()
    return [
        {
            "id": "sample-1",
            "prompt": "A cute cat sitting on a windowsill watching rain",
            "style": "Realistic",
            "size": "Square (1024x1024)",
            "quality": "HD",
            "result": {
                "image_url": "https://oaidalleapiprodscus.blob.core.windows.net/private/org-xwOg6cOaVRpTtrLcPKzvJpMI/user-mem_cmio6ucfv070k0srh69fm65cy/img-8e9avs2NIeWaIvTmKKJTtoJw.png",
                "enhanced_prompt": "A cute cat with soft fur, sitting on a cozy windowsill, gazing outside at raindrops gently falling against the window, warm indoor lighting, peaceful and heartwarming mood",
                "original_prompt": "A cute cat sitting on a windowsill watching rain",
                "style": "Cozy, heartwarming, realistic with soft lighting",
                "generation_metadata": "Gemini image model, enhanced for cuteness and mood",
            },
            "timestamp": stamp - 3_600_000,
        },
        {
            "id": "sample-2",
            "prompt": "A futuristic city with neon lights at night",
            "style": "Cyberpunk",
            "size": "Landscape (1792x1024)",
            "quality": "HD",
            "result": {
                "image_url": "",
                "enhanced_prompt": "A sprawling futuristic cityscape at night, illuminated with vibrant neon lights in hues of blue, pink, and purple, flying cars with glowing underlights",
                "original_prompt": "A futuristic city with neon lights at night",
                "style": "Cyberpunk digital art with high contrast",
                "generation_metadata": "Gemini image model, cyberpunk aesthetic",
            },
            "timestamp": stamp - 7_200_000,
        },
    ]


def enhance_sample_history():
    stamp = now_ms()
    return [
        {
            "id": "sample-1",
            "prompt": "A lighthouse on a cliff during a storm",
            "style": "Oil Painting",
            "size": "Portrait (1024x1792)",
            "quality": "HD",
            "result": {
                "enhanced_prompt": "A weathered stone lighthouse perched on a jagged sea cliff, its beam cutting through a violent storm, towering waves crashing below, dramatic chiaroscuro, thick impasto brushwork",
                "style_suggestion": "Oil Painting with a Romantic-era seascape palette",
                "size_recommendation": "Portrait (1024x1792) to emphasise the height of the cliff",
                "quality_notes": "HD keeps the brush texture and spray detail readable",
                "original_prompt": "A lighthouse on a cliff during a storm",
            },
            "summary": "Added lighting, weather and brushwork detail so the scene reads as a dramatic maritime painting.",
            "timestamp": stamp - 1_800_000,
        },
        {
            "id": "sample-2",
            "prompt": "minimal logo of a fox",
            "style": "Minimalist",
            "size": "Square (1024x1024)",
            "quality": "Standard",
            "result": {
                "enhanced_prompt": "A minimalist geometric fox head logo, flat orange and white shapes, clean negative space, centered on a plain off-white background",
                "style_suggestion": "Minimalist flat vector",
                "size_recommendation": "Square (1024x1024) suits a logo mark",
                "quality_notes": "Standard is enough for flat colour shapes",
                "original_prompt": "minimal logo of a fox",
            },
            "summary": "Turned a short request into a concrete flat-logo brief with palette and composition.",
            "timestamp": stamp - 5_400_000,
        },
    ]


class HistoryStore:
    """Newest-first generation history persisted to a JSON file.

    While sample mode is on the in-memory list is the built-in dataset and
    nothing is written to disk; turning it off reloads the file.
    """

    def __init__(self, path, sample=None, limit=MAX_HISTORY):
        self.path = path
        self.limit = limit
        self._sample = sample or (lambda: [])
        self._lock = threading.Lock()
        self.sample_mode = False
        self._entries = self.load()

    @property
    def entries(self):
        with self._lock:
            return list(self._entries)

    def load(self):
        try:
            with open(self.path, encoding="utf-8") as f:
                stored = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.debug(f"Ignoring unreadable history file {self.path}: {e}")
            return []

        if not isinstance(stored, list):
            return []
        return [item for item in stored if isinstance(item, dict)]

    def _persist(self):
        if self.sample_mode:
            return
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._entries, f)
        except OSError as e:
            logger.warning(f"Could not save history to {self.path}: {e}")

    def append(self, entry):
        with self._lock:
            self._entries = [entry] + self._entries[: self.limit - 1]
            self._persist()
        return entry

    def clear(self):
        with self._lock:
            self._entries = []
            try:
                os.remove(self.path)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not remove history file {self.path}: {e}")

    def replace_with_sample(self):
        with self._lock:
            self.sample_mode = True
            self._entries = list(self._sample())[: self.limit]

    def restore(self):
        with self._lock:
            self.sample_mode = False
            self._entries = self.load()

    def set_sample_mode(self, enabled):
        if enabled:
            self.replace_with_sample()
        else:
            self.restore()
        return self.entries
