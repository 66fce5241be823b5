"""
Converts the shared notes export (notes.html) into plain text.
"""

import re

from bs4 import BeautifulSoup


def extract_notes_text(html: str) -> str:
    """Returns the readable text of a shared notes HTML export."""
    soup = BeautifulSoup(html, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    body = soup.body or soup
    text = body.get_text()
    lines = [line.rstrip() for line in text.splitlines()]
    return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()
