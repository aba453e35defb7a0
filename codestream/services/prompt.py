from functools import lru_cache
from pathlib import Path
from typing import Sequence

from codestream.schemas.generate import Message

PROMPT_SEPARATOR = "\n\nUser Prompt:\n"
NO_FENCE_DIRECTIVE = (
    "Please ONLY return code, NO backticks or language names. "
    "Don't start with ```typescript or ```javascript or ```tsx or ```."
)


@lru_cache(maxsize=1)
def load_system_prompt() -> str:
    # read once per process, never mutated afterwards
    p = Path(__file__).resolve().parents[1] / "prompts" / "code_system.txt"
    return p.read_text(encoding="utf-8").strip()


def build_combined_prompt(system: str, messages: Sequence[Message]) -> str:
    """Single-string prompt for providers without a separate system field.

    Only the last message is used; it is the active request.
    """
    user = messages[-1].content if messages else ""
    return f"{system}{PROMPT_SEPARATOR}{user}\n\n{NO_FENCE_DIRECTIVE}"
