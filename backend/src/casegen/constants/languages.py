"""File extension to language mapping.

Only these extensions are recognised. Anything else (including .tsx and
.jsx) maps to UNKNOWN_LANGUAGE and test files for an unknown language get
the FALLBACK_TEST_EXTENSION.
"""

EXTENSION_TO_LANGUAGE: dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
    "cs": "csharp",
    "go": "go",
    "rs": "rust",
    "php": "php",
    "rb": "ruby",
}

LANGUAGE_TO_EXTENSION: dict[str, str] = {
    language: extension for extension, language in EXTENSION_TO_LANGUAGE.items()
}

UNKNOWN_LANGUAGE = "unknown"
FALLBACK_TEST_EXTENSION = "txt"
