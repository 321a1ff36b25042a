"""Default pipeline settings."""

import os

DEFAULTS = {
    "compiler": "gcc",
    "model": "codellama:7b",
    "fallback_model": "qwen2.5:1.5b",
    "ollama_url": os.environ.get("OLLAMA_URL", "http://127.0.0.1:11434/api/generate"),
    "temperature": 0.1,
    "num_ctx": 4096,
    "compile_timeout": 10,
    "analyzer_timeout": 15,
    "inference_timeout": 60,
    "max_fixes": 5,             # errors sent to the model per batch
    "context_lines": 5,
    "source_extensions": (".c", ".h", ".cpp"),
    "compilable_extensions": (".c", ".cpp"),
    "allowed_commands": ["gcc", "clang", "cc", "arm-none-eabi-gcc", "cppcheck", "clang-tidy"],
}
