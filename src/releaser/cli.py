"""Top-level Click group for the releaser CLI."""

import os
import sys
from contextlib import contextmanager
from pathlib import Path

import click

from releaser.command_runner import CommandRunner, echo_to_stderr
from releaser.documentation import generate_sphinx_files
from releaser.errors import ReleaserError
from releaser.new_project_lock import generate_new_project_cargo_lock
from releaser.release_layout import ReleaseLayout, ReleaseOpts
from releaser.repo_root import resolve_repo_root


@contextmanager
def with_error_handling():
    try:
        yield
    except (ReleaserError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _resolve_layout(opts: ReleaseOpts) -> ReleaseLayout:
    repo_root = opts.repo_root or resolve_repo_root(Path.cwd())
    return ReleaseLayout(repo_root=Path(repo_root), cargo=opts.cargo)


@click.group()
@click.version_option("0.1", prog_name="releaser")
@click.option(
    "--repo-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository to operate on. Defaults to the VCS root of the current directory.",
)
@click.option("--cargo", default="cargo", envvar="RELEASER_CARGO", show_default=True,
              help="Cargo executable to run.")
@click.option("--docs-command", default=None, envvar="RELEASER_DOCS_COMMAND",
              help="Command that regenerates the Sphinx documentation files.")
@click.pass_context
def main(ctx, repo_root, cargo, docs_command):
    """Perform releases from the PyOxidizer repository."""
    ctx.obj = ReleaseOpts(repo_root=repo_root, cargo=cargo, docs_command=docs_command)


@main.command("generate-new-project-cargo-lock")
@click.option("--force-path", is_flag=True, default=False,
              help="Lock against the in-repo pyembed source even for stable versions.")
@click.pass_obj
def generate_new_project_cargo_lock_cmd(opts, force_path):
    """Emit a Cargo.lock file for the pyembed crate."""
    with with_error_handling():
        layout = _resolve_layout(opts)
        click.echo(generate_new_project_cargo_lock(layout, force_path=force_path), nl=False)


@main.command("synchronize-generated-files")
@click.pass_obj
def synchronize_generated_files_cmd(opts):
    """Write out generated files."""
    with with_error_handling():
        layout = _resolve_layout(opts)
        runner = CommandRunner(sink=echo_to_stderr)

        cargo_lock = generate_new_project_cargo_lock(layout, runner=runner)
        generate_sphinx_files(layout, runner, opts.docs_argv())

        lock_path = layout.new_project_lock_path
        click.echo(f"writing {os.fspath(lock_path)}")
        with open(lock_path, "w", encoding="utf-8") as f:
            f.write(cargo_lock)
