"""Parsing of drafted commit proposals.

External drafting tools answer with one or more proposals, each wrapped
in a fenced code block, optionally under numbered headings::

    ### **Commit Proposal #1**
    ```markdown
    feat(menu) - Add allergen filter

    Lets staff filter dishes by allergen.

    <technical>
    ...
    </technical>

    <changelog>
    ## New Features ✨
    - Allergen filter on the menu screen.
    </changelog>
    ```

The parser is line based and tolerant: anything it cannot make sense of
is skipped rather than reported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

PROPOSAL_HEADING = re.compile(r"###\s*\*\*Commit Proposal #\d+\*\*")

# Tried in order
_CODE_BLOCK_PATTERNS = (
    re.compile(r"```markdown\s*\n(.*?)\n```", re.DOTALL),
    re.compile(r"```\s*\n(.*?)\n```", re.DOTALL),
    re.compile(r"```(.*?)```", re.DOTALL),
)


@dataclass(frozen=True)
class CommitProposal:
    title: str
    description: str = ""
    technical: str = ""
    changelog: str = ""

    def to_message(self) -> str:
        """Render as a commit message understood by parse_commit_message."""
        parts = [self.title]
        if self.description:
            parts.append(self.description)
        if self.technical:
            parts.append(f"<technical>\n{self.technical}\n</technical>")
        if self.changelog:
            parts.append(f"<changelog>\n{self.changelog}\n</changelog>")
        return "\n\n".join(parts)


def extract_code_block(text: str) -> str | None:
    for pattern in _CODE_BLOCK_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def parse_proposal_content(content: str) -> CommitProposal | None:
    """Parse the inside of one code block; None if it has no title."""
    lines = content.splitlines()

    title_index = next((i for i, line in enumerate(lines) if line.strip()), None)
    if title_index is None:
        return None

    sections: dict[str, list[str]] = {"description": [], "technical": [], "changelog": []}
    current: str | None = "description"

    for line in lines[title_index + 1 :]:
        if "<technical>" in line:
            current = "technical"
            continue
        if "<changelog>" in line:
            current = "changelog"
            continue
        if "</technical>" in line or "</changelog>" in line:
            current = None
            continue

        if current == "description":
            if line.strip():
                sections["description"].append(line)
        elif current is not None:
            sections[current].append(line)

    return CommitProposal(
        title=lines[title_index].strip(),
        description="\n".join(sections["description"]).strip(),
        technical="\n".join(sections["technical"]).strip(),
        changelog="\n".join(sections["changelog"]).strip(),
    )


def parse_commit_proposals(response: str) -> list[CommitProposal]:
    """Extract every commit proposal from a drafting tool's response.

    Args:
        response: Raw response text

    Returns:
        Parsed proposals in order; empty if none could be read
    """
    starts = [m.start() for m in PROPOSAL_HEADING.finditer(response)]
    if starts:
        bounds = zip(starts, [*starts[1:], len(response)])
        chunks = [response[start:end] for start, end in bounds]
    else:
        chunks = [response]

    proposals: list[CommitProposal] = []
    for chunk in chunks:
        block = extract_code_block(chunk)
        if block is None:
            continue
        proposal = parse_proposal_content(block)
        if proposal is not None:
            proposals.append(proposal)
    return proposals
