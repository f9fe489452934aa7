"""Reading and writing configuration documents on disk.

Documents are UTF-8 JSON. They are written tab-indented with a trailing
newline so they diff cleanly when kept under version control.
"""

import json
from pathlib import Path


def load_document(path):
    """Load a JSON document.

    Raises:
        OSError: if the file cannot be opened or read.
        ValueError: if the content is not valid JSON
            (``json.JSONDecodeError`` is a ValueError).
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def dump_document(data):
    """Serialize a document to text."""
    return json.dumps(data, indent="\t") + "\n"


def save_document(data, path):
    """Write a JSON document, replacing any existing file.

    Returns the path written. OSError propagates to the caller.
    """
    target = Path(path)
    with open(target, "w", encoding="utf-8") as f:
        f.write(dump_document(data))
    return target
