from typing import List, Tuple

"""
Minimal line-based markdown for educational articles.
Only what the articles use: "# " / "## " headings, "- " bullet lists and
plain paragraphs. Blank lines are dropped.
"""


def parse_blocks(markdown: str) -> List[Tuple[str, object]]:
    """Returns (kind, payload) blocks: ("h1", text), ("h2", text), ("list", [items]) or ("p", text)."""
    blocks = []
    list_items: List[str] = []

    def flush_list():
        if list_items:
            blocks.append(("list", list(list_items)))
            list_items.clear()

    for raw_line in markdown.split("\n"):
        line = raw_line.strip()
        if line.startswith("- "):
            list_items.append(line[2:].strip())
            continue

        flush_list()
        if not line:
            continue
        if line.startswith("## "):
            blocks.append(("h2", line[3:].strip()))
        elif line.startswith("# "):
            blocks.append(("h1", line[2:].strip()))
        else:
            blocks.append(("p", line))

    flush_list()
    return blocks


def render_text(markdown: str) -> str:
    """Renders to plain terminal text with underlined headings."""
    out = []
    for kind, payload in parse_blocks(markdown):
        if kind == "h1":
            out.append(f"{payload}\n{'=' * len(payload)}")
        elif kind == "h2":
            out.append(f"{payload}\n{'-' * len(payload)}")
        elif kind == "list":
            out.append("\n".join(f"  * {item}" for item in payload))
        else:
            out.append(payload)
    return "\n\n".join(out)
