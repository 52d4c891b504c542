# mdstream/plugins/code_block_formatter/languages.py
"""Language alias table for fenced code blocks.

Maps the short or alternate tags people put after an opening fence to the
canonical language identifiers used in rendered class names and passed to
the highlighter.
"""

DEFAULT_LANGUAGE = "javascript"

LANGUAGE_ALIASES = {
    'js': 'javascript',
    'jsx': 'jsx',
    'tsx': 'typescript',
    'ts': 'typescript',
    'py': 'python',
    'rb': 'ruby',
    'sh': 'bash',
    'shell': 'bash',
    'zsh': 'bash',
    'yml': 'yaml',
    'html': 'markup',
    'csharp': 'cs',
    'c#': 'cs',
    'java': 'java',
    'php': 'php',
    'yaml': 'yaml',
    'sql': 'sql',
    'css': 'css',
    'xml': 'xml',
    'json': 'json',
}


def normalize_language(tag: str) -> str:
    """Normalize a fence language tag to its canonical identifier.

    Lowercases and trims the tag, then looks it up in LANGUAGE_ALIASES.
    Unknown tags are returned trimmed and lowercased; an empty tag falls
    back to DEFAULT_LANGUAGE.

    Args:
        tag: Language tag as written after the opening fence (may be empty).

    Returns:
        Canonical language identifier.
    """
    language = (tag or "").strip().lower()
    language = LANGUAGE_ALIASES.get(language, language)
    return language or DEFAULT_LANGUAGE
