import re


def expand(text: str, key: str, value: str) -> str:
    """
    Replace $key and ${key} with value.

    Only exact names are replaced, so expanding "key" leaves $key1 and
    ${key1} untouched.
    """
    escaped = re.escape(key)
    pattern = re.compile(r'\$(?:\{' + escaped + r'\}|' + escaped + r'(?![A-Za-z0-9_]))')
    return pattern.sub(lambda _: value, text)
