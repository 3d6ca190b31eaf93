r"""``{{ ... }}`` template rendering for config values.

Two functions are available inside a template:

- ``env_var('NAME')`` / ``env_var('NAME', 'default')``: environment variable
- ``var('NAME')`` / ``var('NAME', 'default')``: variable passed with ``--vars``

Keys such as encryption secrets are meant to come from the environment this
way rather than being written into the file.

Arguments are quoted with single or double quotes and there is no escaping,
so a default may contain the other kind of quote but not its own:
``env_var('GREETING', "it's")`` works, ``env_var('GREETING', 'it\'s')`` does
not and fails as a malformed expression.
"""

import os
import re
from typing import Any, Callable, Dict, Mapping, Optional

from transformable.core.exceptions import ConfigError

_TEMPLATE = re.compile(r"\{\{\s*(.*?)\s*\}\}")
_CALL = re.compile(
    r"""^(?P<func>\w+)\(\s*(?:'(?P<sq_name>[^']+)'|"(?P<dq_name>[^"]+)")"""
    r"""(?:\s*,\s*(?:'(?P<sq_default>[^']*)'|"(?P<dq_default>[^"]*)"))?\s*\)$"""
)

_MISSING = object()


def render_templates(
    config_dict: Dict[str, Any], cli_vars: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Return a copy of ``config_dict`` with every template string rendered.

    Args:
        config_dict: Parsed YAML mapping
        cli_vars: Variables passed via CLI (e.g., --vars key=value)

    Raises:
        ConfigError: On unknown functions, malformed expressions or a
            variable that is neither set nor given a default
    """
    functions: Dict[str, Callable[[str, Any], str]] = {
        "env_var": lambda name, default: _lookup(os.environ, name, default, "Environment variable"),
        "var": lambda name, default: _lookup(cli_vars or {}, name, default, "CLI variable"),
    }
    return _render(config_dict, functions)


def _lookup(source: Mapping[str, str], name: str, default: Any, kind: str) -> str:
    if name in source:
        return source[name]
    if default is not _MISSING:
        return default
    raise ConfigError(f"{kind} '{name}' not found", context={"key": name})


def _render(value: Any, functions: Dict[str, Callable[[str, Any], str]]) -> Any:
    if isinstance(value, dict):
        return {key: _render(item, functions) for key, item in value.items()}
    if isinstance(value, list):
        return [_render(item, functions) for item in value]
    if isinstance(value, str):
        return _TEMPLATE.sub(lambda m: _evaluate(m.group(1), functions), value)
    return value


def _evaluate(expr: str, functions: Dict[str, Callable[[str, Any], str]]) -> str:
    call = _CALL.match(expr)
    if call is None:
        raise ConfigError(
            f"Template rendering failed: {expr}",
            context={
                "expression": expr,
                "supported": "env_var('KEY'[, 'default']), var('KEY'[, 'default'])",
                "quoting": "arguments cannot contain their own quote character",
            },
        )

    func = functions.get(call.group("func"))
    if func is None:
        raise ConfigError(
            f"Unknown function: {call.group('func')}",
            context={"expression": expr, "available": ", ".join(functions)},
        )

    name = call.group("sq_name") or call.group("dq_name")
    default = call.group("sq_default")
    if default is None:
        default = call.group("dq_default")
    return str(func(name, _MISSING if default is None else default))
