"""Jinja2 skeletons for generated documents, with per-vault overrides."""

from __future__ import annotations

from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader

BELONGING_SKELETON = "belonging.md.j2"


def build_template_environment(group: str, *, vault_root: Path | None = None) -> Environment:
    """Build a Jinja2 environment with vault overrides before packaged defaults.

    Overrides live in ``.chronolinker/templates/`` inside the vault, either
    namespaced by *group* (``.chronolinker/templates/belonging/``) or flat.
    """
    loaders: list[BaseLoader] = []
    if vault_root is not None:
        template_root = vault_root / ".chronolinker" / "templates"
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("chronolinker", f"templates/{group}"))
    return Environment(loader=ChoiceLoader(loaders), keep_trailing_newline=True)


def render_skeleton(
    name: str,
    *,
    group: str = "belonging",
    vault_root: Path | None = None,
    **context: object,
) -> str:
    """Render the skeleton template *name* with *context*."""
    env = build_template_environment(group, vault_root=vault_root)
    return env.get_template(name).render(**context)
