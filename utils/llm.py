"""Local inference service client (Ollama generate API) and output sanitising."""

import json
import re
import socket
import urllib.error
import urllib.request
from enum import Enum

from config.defaults import DEFAULTS

OLLAMA_URL = DEFAULTS["ollama_url"]

_RESPONSE_KEYS = ("response", "code", "fix", "text")

_RESOURCE_SIGNALS = ("requires more system memory", "out of memory")


class InferenceError(RuntimeError):
    """The inference service answered with an error status."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class FailureKind(Enum):
    RESOURCE_EXHAUSTED = "resource_exhausted"
    TIMEOUT = "timeout"
    OTHER = "other"


def classify_failure(exc) -> FailureKind:
    """Decide how the retry policy treats a failed inference call."""
    if isinstance(exc, (TimeoutError, socket.timeout)):
        return FailureKind.TIMEOUT
    if isinstance(exc, urllib.error.URLError) and not isinstance(exc, urllib.error.HTTPError):
        if isinstance(exc.reason, (TimeoutError, socket.timeout)):
            return FailureKind.TIMEOUT
        if "timed out" in str(exc.reason).lower():
            return FailureKind.TIMEOUT
    message = str(exc).lower()
    if any(signal in message for signal in _RESOURCE_SIGNALS):
        return FailureKind.RESOURCE_EXHAUSTED
    return FailureKind.OTHER


def _loads_lenient(text):
    """Parse JSON, falling back to the first {...} block. None if neither parses."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    m = re.search(r"\{.*\}", text, re.DOTALL)
    if m:
        try:
            return json.loads(m.group(0))
        except json.JSONDecodeError:
            return None
    return None


def extract_response_text(body):
    """Pull the generated text out of a raw service response body.

    The service normally answers ``{"response": "..."}``, but some builds
    wrap the text as ``code``, ``fix`` or ``text``, or return a bare string.
    """
    data = _loads_lenient(body) if isinstance(body, str) else body
    if data is None:
        return body if isinstance(body, str) else ""
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        for key in _RESPONSE_KEYS:
            if isinstance(data.get(key), str):
                return data[key]
    return json.dumps(data)


def generate(model, prompt, timeout=None, url=None):
    """POST one non-streaming generate request and return the response text.

    Raises:
        InferenceError: The service returned an HTTP error status.
        urllib.error.URLError / TimeoutError: Transport failures.
    """
    if timeout is None:
        timeout = DEFAULTS["inference_timeout"]
    payload = {
        "model": model,
        "prompt": prompt,
        "stream": False,
        # No "format": "json" here; some models answer 500 to it
        "options": {"temperature": DEFAULTS["temperature"], "num_ctx": DEFAULTS["num_ctx"]},
    }
    req = urllib.request.Request(
        url or OLLAMA_URL,
        data=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as e:
        try:
            detail = e.read().decode("utf-8", errors="replace")
        except OSError:
            detail = ""
        data = _loads_lenient(detail) if detail else None
        if isinstance(data, dict) and isinstance(data.get("error"), str):
            detail = data["error"]
        raise InferenceError(detail or f"HTTP {e.code}", status=e.code) from e
    return extract_response_text(body)


_FENCE_RE = re.compile(r"```[\w+#.-]*[ \t]*\n?(.*?)```", re.DOTALL)
_NOTE_RE = re.compile(r"^(?://\s*)?note[: ]", re.IGNORECASE)
_NUMBER_PREFIX_RE = re.compile(r"^\d+\s*:\s*")


def sanitize_suggestion(raw):
    """Reduce free-form model output to plain source lines.

    Fenced code blocks win over surrounding prose. Blank lines, quote or
    annotation lines (">", ">>>"), stray fences and "Note:" lines are dropped,
    and "12: " style numbering is stripped unless the line is a preprocessor
    directive.
    """
    if not raw or not isinstance(raw, str):
        return ""

    text = raw.strip()
    blocks = _FENCE_RE.findall(text)
    if blocks:
        text = "\n".join(block.strip() for block in blocks).strip()

    out = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue
        if trimmed.startswith(">") or trimmed.startswith("```"):
            continue
        if _NOTE_RE.match(trimmed):
            continue
        if not trimmed.startswith("#") and _NUMBER_PREFIX_RE.match(trimmed):
            line = _NUMBER_PREFIX_RE.sub("", trimmed)
            if not line:
                continue
        out.append(line.rstrip())

    return "\n".join(out).strip()
