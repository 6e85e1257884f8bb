"""Text formatting utilities for the TUI.

Hides how transcript entries are labelled and how model output is
cleaned before markdown rendering.
"""

import re

from ..chat import ChatRole

# (label, icon, css class) per transcript role
_ROLE_STYLES = {
    ChatRole.USER: ("You", ">", "user-message"),
    ChatRole.ASSISTANT: ("Gemini", "<", "assistant-message"),
    ChatRole.ERROR: ("Error", "!", "error-message"),
    ChatRole.CONTEXT: ("Context", "+", "context-message"),
}

_LATEX_SYMBOLS = {
    r"\times": "x",
    r"\cdot": "*",
    r"\pm": "+/-",
    r"\leq": "<=",
    r"\geq": ">=",
    r"\neq": "!=",
    r"\approx": "~=",
    r"\infty": "infinity",
    r"\ldots": "...",
    r"\cdots": "...",
    r"\rightarrow": "->",
    r"\to": "->",
}


def role_style(role: ChatRole) -> tuple[str, str, str]:
    """Header label, icon and CSS class for a transcript role."""
    return _ROLE_STYLES[role]


def clean_latex(text: str) -> str:
    """Replace LaTeX math that Textual's markdown renderer shows verbatim.

    Only the math delimiters and a handful of common commands are touched;
    code blocks are left alone.
    """
    parts = re.split(r"(```.*?```)", text, flags=re.DOTALL)
    for i in range(0, len(parts), 2):
        parts[i] = _clean_math(parts[i])
    return "".join(parts)


def _clean_math(text: str) -> str:
    text = re.sub(r"\\[\(\)\[\]]", "", text)
    text = re.sub(r"\$\$", "", text)
    text = re.sub(r"(?<!\\)\$([^$\n]+)(?<!\\)\$", r"\1", text)
    text = re.sub(r"\\frac\{([^}]*)\}\{([^}]*)\}", r"(\1)/(\2)", text)
    text = re.sub(r"\\sqrt\{([^}]*)\}", r"sqrt(\1)", text)
    text = re.sub(r"\\(?:text|textbf|textit|mathrm|mathbf)\{([^}]*)\}", r"\1", text)
    for command, replacement in _LATEX_SYMBOLS.items():
        text = re.sub(re.escape(command) + r"(?![a-zA-Z])", replacement, text)
    return text
