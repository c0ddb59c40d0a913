"""Regenerate the Sphinx documentation sources checked into the repository."""

import click

from releaser.command_runner import CommandInvocation


def generate_sphinx_files(layout, runner, docs_argv):
    """Run the configured documentation generator from the repository root.

    Does nothing but print a notice when no generator is configured.
    """
    if not docs_argv:
        click.echo("no documentation command configured; skipping Sphinx files", err=True)
        return None

    return runner.run(CommandInvocation(
        label="docs",
        cwd=str(layout.repo_root),
        program=docs_argv[0],
        args=tuple(docs_argv[1:]),
    ))
