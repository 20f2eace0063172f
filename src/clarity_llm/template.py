"""Prompt template filling and message construction."""

import re
from collections.abc import Mapping
from typing import Any

from clarity_llm.models import Message, PromptTemplate, Role

_PLACEHOLDER_RE = re.compile(r"\{\{([^{}]+)\}\}")


def fill(template: str, variables: Mapping[str, Any] | None = None) -> str:
    """Replace every ``{{key}}`` bound in ``variables`` with its string value.

    Unbound placeholders are left verbatim. Substituted values are not
    scanned again, so a value containing ``{{x}}`` is inserted as-is.
    """
    if not variables:
        return template

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in variables:
            return str(variables[key])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, template)


def build_messages(template: PromptTemplate) -> list[Message]:
    """Render a template into an optional system message followed by a user message."""
    messages: list[Message] = []
    if template.system:
        system = fill(template.system, template.variables)
        messages.append(Message(role=Role.SYSTEM, content=system))
    messages.append(Message(role=Role.USER, content=fill(template.user, template.variables)))
    return messages
