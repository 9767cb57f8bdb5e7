"""Standalone HTML document for previewing generated content in a sandboxed frame."""

TAILWIND_CDN = "https://cdn.tailwindcss.com"

_DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <script src="{tailwind}"></script>
</head>
<body>
{content}
</body>
</html>
"""


def wrap_document(content: str) -> str:
    # The content is inserted as-is; the frame's sandbox is what isolates it
    return _DOCUMENT.format(tailwind=TAILWIND_CDN, content=content)
