"""
Architecture boundary tests — enforce clean architecture layer dependencies.

Allowed dependency direction:
  domain/         → stdlib, pydantic only (no application, infrastructure, api, config)
  config/         → domain
  infrastructure/ → domain, config, logging_config (NOT application, api)
  application/    → domain, infrastructure, config, logging_config (NOT api)
  api/            → application, domain, logging_config (NOT infrastructure)

Only main.py wires infrastructure into the API.
"""

import ast
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).parent.parent

LAYER_RULES = {
    "domain": ["application", "infrastructure", "api", "config", "logging_config"],
    "config": ["application", "infrastructure", "api"],
    "infrastructure": ["application", "api"],
    "application": ["api"],
    "api": ["infrastructure"],
}


def _collect_imports(filepath: Path) -> list[str]:
    """Parse a Python file and return all imported module names."""
    source = filepath.read_text()
    tree = ast.parse(source)
    imports: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            imports.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            imports.append(node.module)
    return imports


def _get_python_files(layer_dir: Path) -> list[Path]:
    if not layer_dir.exists():
        return []
    return sorted(layer_dir.rglob("*.py"))


@pytest.mark.parametrize("layer", sorted(LAYER_RULES))
def test_layer_has_no_forbidden_imports(layer):
    forbidden = LAYER_RULES[layer]
    violations = [
        f"{filepath.relative_to(BACKEND_ROOT)}: imports {imp}"
        for filepath in _get_python_files(BACKEND_ROOT / layer)
        for imp in _collect_imports(filepath)
        for name in forbidden
        if imp == name or imp.startswith(f"{name}.")
    ]
    assert violations == [], f"{layer} layer violations:\n" + "\n".join(violations)


@pytest.mark.parametrize("layer", sorted(LAYER_RULES))
def test_layer_is_not_empty(layer):
    """Guard against the boundary checks silently passing on a renamed directory."""
    assert _get_python_files(BACKEND_ROOT / layer)


def test_domain_does_not_do_io():
    """Domain stays pure: no HTTP clients or cache stores."""
    io_modules = {"httpx", "redis", "diskcache", "cachetools", "dotenv"}
    violations = [
        f"{filepath.name}: imports {imp}"
        for filepath in _get_python_files(BACKEND_ROOT / "domain")
        for imp in _collect_imports(filepath)
        if imp.split(".")[0] in io_modules
    ]
    assert violations == []
