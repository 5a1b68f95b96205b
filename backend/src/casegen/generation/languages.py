"""Language inference from file names and test file naming."""

from casegen.constants.languages import (
    EXTENSION_TO_LANGUAGE,
    FALLBACK_TEST_EXTENSION,
    LANGUAGE_TO_EXTENSION,
    UNKNOWN_LANGUAGE,
)


def get_extension(file_name: str) -> str:
    """Return the lower-cased text after the last dot.

    A name without a dot is its own extension, so ``Makefile`` yields
    ``makefile``, which is not a known language.
    """
    return file_name.rsplit(".", 1)[-1].lower()


def get_language_from_extension(file_name: str) -> str:
    """Infer the programming language of a file from its extension.

    Args:
        file_name: File name or path.

    Returns:
        Language name, or ``"unknown"`` for unmapped extensions.
    """
    return EXTENSION_TO_LANGUAGE.get(get_extension(file_name), UNKNOWN_LANGUAGE)


def get_file_extension(language: str) -> str:
    """Return the source extension for a language, ``txt`` if unmapped."""
    return LANGUAGE_TO_EXTENSION.get(language, FALLBACK_TEST_EXTENSION)


def strip_extension(file_name: str) -> str:
    """Remove the last extension; names without one are returned unchanged.

    Only the last path segment is considered, and a leading dot does not
    start an extension (``.env`` stays ``.env``, ``v1.2/Calc`` is unchanged).
    """
    directory, slash, base = file_name.rpartition("/")
    stem, dot, extension = base.rpartition(".")
    if not dot or not stem or not extension:
        return file_name
    return f"{directory}{slash}{stem}"


def get_test_file_name(file_name: str, language: str) -> str:
    """Name of the generated test file for a source file.

    ``get_test_file_name("Calculator.js", "javascript") == "Calculator.test.js"``
    """
    return f"{strip_extension(file_name)}.test.{get_file_extension(language)}"
