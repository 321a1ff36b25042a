"""Fixer agent — asks the local model for a corrected line per error."""

import logging

from config.defaults import DEFAULTS
from core.state import Fix
from utils import llm
from utils.llm import FailureKind, classify_failure, sanitize_suggestion
from utils.parsers import resolve_file
from utils.source import get_code_context, read_text

logger = logging.getLogger(__name__)

PRIMARY_CONFIDENCE = 0.8
FALLBACK_CONFIDENCE = 0.7

_PROMPT_TEMPLATE = """Fix this C code error:

File: {file}
Line: {line}
Error: {message}
Code context:
{context}

Provide ONLY the corrected code for the problematic line(s). No explanations."""


class BatchAborted(Exception):
    """A non-retryable inference failure; no further errors are attempted."""


class FixerAgent:
    """Generates Fix records for the first few errors, one model call each.

    Retry policy per error: primary model, then the fallback model once if
    the primary ran out of memory or timed out. A failure of any other kind
    stops the batch; fixes already produced are still returned.
    """

    name = "fixer"

    def __init__(self, model=None, fallback_model=None, timeout=None,
                 max_fixes=None, context_lines=None, verbose=False):
        self.model = model or DEFAULTS["model"]
        self.fallback_model = fallback_model
        self.timeout = timeout or DEFAULTS["inference_timeout"]
        self.max_fixes = DEFAULTS["max_fixes"] if max_fixes is None else max_fixes
        self.context_lines = DEFAULTS["context_lines"] if context_lines is None else context_lines
        self.verbose = verbose

    def run(self, errors, files) -> list:
        fixes = []
        for error in list(errors)[:self.max_fixes]:
            prompt = self.build_prompt(error, files)
            try:
                suggestion, model = self._request(prompt)
            except BatchAborted as e:
                self._log("AI fix failed for %s:%s: %s", error.file, error.line, e)
                break
            if suggestion is None:
                self._log("AI fix skipped for %s:%s", error.file, error.line)
                continue
            if not suggestion:
                continue
            fixes.append(Fix(
                error=error,
                suggestion=suggestion,
                confidence=PRIMARY_CONFIDENCE if model == self.model else FALLBACK_CONFIDENCE,
                model=model,
            ))
        return fixes

    def build_prompt(self, error, files) -> str:
        path = resolve_file(error.file, files)
        content = read_text(path) if path else ""
        return _PROMPT_TEMPLATE.format(
            file=error.file,
            line=error.line,
            message=error.message,
            context=get_code_context(content, error.line, self.context_lines),
        )

    def _models(self):
        models = [self.model]
        if self.fallback_model and self.fallback_model != self.model:
            models.append(self.fallback_model)
        return models

    def _request(self, prompt):
        """Return (sanitized_suggestion, model), or (None, None) to skip this error.

        Raises:
            BatchAborted: The failure was neither resource exhaustion nor a timeout.
        """
        models = self._models()
        for idx, model in enumerate(models):
            try:
                raw = llm.generate(model, prompt, timeout=self.timeout)
            except Exception as e:
                kind = classify_failure(e)
                if kind is FailureKind.OTHER:
                    raise BatchAborted(str(e)) from e
                if idx + 1 < len(models):
                    self._log('Model "%s" %s, falling back to "%s"',
                              model, kind.value, models[idx + 1])
                    continue
                self._log('Model "%s" %s', model, kind.value)
                return None, None
            return sanitize_suggestion(raw), model
        return None, None

    def _log(self, msg, *args):
        if self.verbose:
            logger.warning(msg, *args)
