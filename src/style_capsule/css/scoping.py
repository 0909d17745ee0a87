"""Selector rewriting: confine a stylesheet to one capsule.

Two strategies are provided as independent pure functions:

    .section { color: red; }

selector patching (``scope_selectors``) rewrites every selector::

    [data-capsule="a1b2c3d4"] .section { color: red; }

nesting (``scope_with_nesting``) wraps the stylesheet unmodified::

    [data-capsule="a1b2c3d4"] {
    .section { color: red; }
    }

Both return ``None``, empty or whitespace-only input unchanged and validate
size and capsule id before touching the text.
"""

from __future__ import annotations

import re
from enum import Enum

from style_capsule.css.comments import strip_comments
from style_capsule.css.model import SCOPE_MARKER, ScopingStrategy, capsule_selector
from style_capsule.css.validation import is_blank, validate_capsule_id, validate_css_size
from style_capsule.instrumentation import instrument_css_processing

__all__ = ["scope_selectors", "scope_with_nesting", "scope_css"]

# Rule boundaries. The text between two braces is a header span: a selector
# list, an at-rule prelude or declarations. One pass, no backtracking.
_BRACE_RE = re.compile(r"[{}]")

_AT_RULE_NAME_RE = re.compile(r"@(?:-[A-Za-z]+-)?(?P<name>[A-Za-z-]+)")

# At-rules whose bodies hold ordinary style rules.
_GROUPING_AT_RULES = frozenset(
    {"media", "supports", "container", "layer", "document", "scope", "starting-style"}
)

_HOST_CONTEXT_RE = re.compile(r"^:host-context\(([^)]+)\)")
_HOST_FUNCTION_RE = re.compile(r"^:host\(([^)]+)\)")
_HOST_RE = re.compile(r"^:host\b")


class _Block(Enum):
    GROUP = "group"  # nested rules are scoped
    OPAQUE = "opaque"  # contents pass through untouched


def _scope_selector(selector: str, attr: str) -> str:
    """Scope a single, already trimmed selector."""
    if selector.startswith(":host"):
        selector = _HOST_CONTEXT_RE.sub(lambda m: f"{attr} {m.group(1)}", selector, count=1)
        selector = _HOST_FUNCTION_RE.sub(lambda m: f"{attr}{m.group(1)}", selector, count=1)
        return _HOST_RE.sub(lambda m: attr, selector, count=1)
    return f"{attr} {selector}"


def _scope_selector_list(raw: str, attr: str) -> str:
    """Scope a selector list, keeping the whitespace around it."""
    body = raw.strip()
    if not body or SCOPE_MARKER in raw:
        return raw
    leading = raw[: len(raw) - len(raw.lstrip())]
    trailing = raw[len(raw.rstrip()):]
    scoped = [_scope_selector(s.strip(), attr) for s in body.split(",") if s.strip()]
    return f"{leading}{', '.join(scoped)}{trailing}"


def _statement_end(header: str) -> int:
    """Index just past the last top-level ``;`` in *header*, or 0.

    Semicolons inside quotes, ``[...]`` or ``(...)`` belong to a selector or
    an at-rule prelude, e.g. ``a[title="x;y"]`` or ``url("a;b")``.
    """
    end = depth = 0
    quote = None
    escaped = False
    for i, ch in enumerate(header):
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch in "[(":
            depth += 1
        elif ch in "])":
            depth = max(depth - 1, 0)
        elif ch == ";" and depth == 0:
            end = i + 1
    return end


def _classify_at_rule(prelude: str) -> _Block:
    match = _AT_RULE_NAME_RE.match(prelude)
    if match and match.group("name").lower() in _GROUPING_AT_RULES:
        return _Block.GROUP
    return _Block.OPAQUE


def _patch_selectors(css: str, capsule_id: str) -> str:
    """Rewrite every top-level and at-rule-nested selector list in *css*."""
    attr = capsule_selector(capsule_id)
    parts: list[str] = []
    stack: list[_Block] = []
    end = 0

    for match in _BRACE_RE.finditer(css):
        header, brace = css[end : match.start()], match.group()
        end = match.end()

        if brace == "}":
            parts.append(header)
            parts.append(brace)
            if stack:
                stack.pop()
            continue

        # Inside a style rule or an opaque at-rule: copy verbatim.
        if stack and stack[-1] is _Block.OPAQUE:
            parts.append(header)
            parts.append(brace)
            stack.append(_Block.OPAQUE)
            continue

        # Statements such as "@import url(x);" precede the real header.
        cut = _statement_end(header)
        statements, selectors = header[:cut], header[cut:]

        if selectors.strip().startswith("@"):
            parts.append(header)
            stack.append(_classify_at_rule(selectors.strip()))
        else:
            parts.append(statements)
            parts.append(_scope_selector_list(selectors, attr))
            stack.append(_Block.OPAQUE)
        parts.append(brace)

    parts.append(css[end:])
    return "".join(parts)


def scope_selectors(
    css: str | None, capsule_id: str, *, component: object = None
) -> str | None:
    """Prefix every selector in *css* with the capsule attribute selector.

    Comments are stripped first and not restored. At-rule preludes are
    left as they are while the style rules inside ``@media``, ``@supports``
    and similar grouping rules are scoped. Bodies of ``@keyframes``,
    ``@font-face`` and other non-grouping at-rules are not scanned, so
    keyframe selectors such as ``from`` or ``50%`` are never prefixed. Selector lists that already
    contain ``[data-capsule=`` are not scoped again.

    Raises SizeExceededError or InvalidCapsuleIdError before any scanning.
    """
    if is_blank(css):
        return css
    validate_css_size(css)
    validate_capsule_id(capsule_id)

    return instrument_css_processing(
        strategy=ScopingStrategy.SELECTOR_PATCHING,
        component=component,
        capsule_id=capsule_id,
        css=css,
        operation=lambda: _patch_selectors(strip_comments(css), capsule_id),
    )


def scope_with_nesting(
    css: str | None, capsule_id: str, *, component: object = None
) -> str | None:
    """Wrap *css* unmodified in a single ``[data-capsule="<id>"] { ... }`` block."""
    if is_blank(css):
        return css
    validate_css_size(css)
    validate_capsule_id(capsule_id)

    return instrument_css_processing(
        strategy=ScopingStrategy.NESTING,
        component=component,
        capsule_id=capsule_id,
        css=css,
        operation=lambda: f"{capsule_selector(capsule_id)} {{\n{css}\n}}",
    )


def scope_css(
    css: str | None,
    capsule_id: str,
    strategy: ScopingStrategy | str = ScopingStrategy.SELECTOR_PATCHING,
    *,
    component: object = None,
) -> str | None:
    """Scope *css* with the rewriter selected by *strategy*."""
    if ScopingStrategy.coerce(strategy) is ScopingStrategy.NESTING:
        return scope_with_nesting(css, capsule_id, component=component)
    return scope_selectors(css, capsule_id, component=component)
