"""CLI for report-outliner: manage projects and their section outlines."""

import json
import sqlite3
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from report_outliner.config import DATABASE_FILENAME, DEFAULT_MAX_DEPTH, resolve_data_directory
from report_outliner.core.database.schema import migrate_schema
from report_outliner.core.importer.json_reader import parse_outline_text
from report_outliner.core.outline.validator import Rejected, validate
from report_outliner.core.store.serialization import project_to_dict
from report_outliner.core.store.sqlite_store import SqliteProjectStore
from report_outliner.core.tree.markdown import render_sections_as_markdown
from report_outliner.core.tree.operations import walk
from report_outliner.editor import EditResult, ProjectEditor, create_project
from report_outliner.logging_config import configure_logging

app = typer.Typer(help="Report outliner: build and edit nested report outlines.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Directory holding the project database"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Also write debug logs to this file"),
    ] = None,
) -> None:
    configure_logging(verbose=verbose, log_file=log_file)


def _open_db(data_dir: Path | None, *, create: bool = False) -> sqlite3.Connection:
    """Open the project database, raising typer.Exit if it doesn't exist."""
    dst = data_dir or resolve_data_directory()
    db_path = dst / DATABASE_FILENAME
    if not db_path.exists():
        if not create:
            logger.error("Project database not found: {}. Run 'create' first.", db_path)
            raise typer.Exit(1)
        dst.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    migrate_schema(conn)
    return conn


def _open_editor(store: SqliteProjectStore, project_id: str) -> ProjectEditor:
    editor = ProjectEditor.load(store, project_id)
    if editor is None:
        typer.echo(f"Project '{project_id}' not found.")
        raise typer.Exit(1)
    return editor


def _report(result: EditResult) -> None:
    if result.message:
        typer.echo(result.message)
    if not result.success:
        raise typer.Exit(1)
    if result.section_id:
        typer.echo(f"  id={result.section_id}")


def _read_outline_file(path: Path) -> object:
    try:
        return parse_outline_text(path.read_text(encoding="utf-8"))
    except ValueError as e:
        typer.echo(str(e))
        raise typer.Exit(1) from e


@app.command()
def create(
    title: str = typer.Argument(..., help="Project title"),
    context: str = typer.Option("", "--context", "-c", help="What the project is about"),
    max_depth: int = typer.Option(DEFAULT_MAX_DEPTH, "--max-depth", help="Maximum outline nesting depth"),
    unconstrained: bool = typer.Option(
        False, "--unconstrained", help="Do not enforce outline depth limits"
    ),
    data_dir: DataDirOption = None,
) -> None:
    """Create a new, empty project."""
    conn = _open_db(data_dir, create=True)
    try:
        project = create_project(
            SqliteProjectStore(conn),
            title=title,
            context=context,
            max_depth=max_depth,
            constrained=not unconstrained,
        )
        typer.echo(project.id)
    finally:
        conn.close()


@app.command()
def projects(
    title: Annotated[
        str | None,
        typer.Option("--title", "-t", help="Only projects with this title (case-insensitive)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """List all projects."""
    conn = _open_db(data_dir)
    try:
        store = SqliteProjectStore(conn)
        stored = store.list_projects() if title is None else store.find_by_title(title)
        typer.echo(f"{len(stored)} projects:\n")
        for project in stored:
            count = sum(1 for _ in walk(project.sections))
            typer.echo(f"  {project.title} - {count} sections  [id={project.id}]")
    finally:
        conn.close()


@app.command()
def show(
    project_id: str = typer.Argument(..., help="Project ID"),
    section: Annotated[
        str | None,
        typer.Option("--section", "-s", help="Show only this section's subtree"),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = None,
    ids: bool = typer.Option(False, "--ids", help="List numbered sections with their ids"),
    data_dir: DataDirOption = None,
) -> None:
    """Print a project's outline as markdown."""
    conn = _open_db(data_dir)
    try:
        project = _open_editor(SqliteProjectStore(conn), project_id).project
        if ids:
            for number, depth, node in walk(project.sections):
                typer.echo(f"{'  ' * depth}{number} {node.name}  [{node.kind.value}, id={node.id}]")
            return

        md = render_sections_as_markdown(project.sections, section_id=section, max_depth=max_depth)
        if md:
            typer.echo(f"# {project.title}\n")
            typer.echo(md)
        elif section:
            typer.echo(f"Section '{section}' not found in project.")
            raise typer.Exit(1)
        else:
            typer.echo("Project has no sections yet.")
    finally:
        conn.close()


@app.command(name="validate")
def validate_cmd(
    outline_file: Path = typer.Argument(..., help="JSON outline file", exists=True),
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Reject outlines nested deeper than this"),
    ] = None,
) -> None:
    """Check an outline file without applying it."""
    result = validate(_read_outline_file(outline_file), max_depth)
    if isinstance(result, Rejected):
        typer.echo(f"Invalid outline: {result.reason}")
        raise typer.Exit(1)
    typer.echo(f"Outline OK ({len(result.outline)} root sections)")


@app.command(name="apply-outline")
def apply_outline(
    project_id: str = typer.Argument(..., help="Project ID"),
    outline_file: Path = typer.Argument(..., help="JSON outline file", exists=True),
    data_dir: DataDirOption = None,
) -> None:
    """Replace a project's sections with an outline file."""
    raw = _read_outline_file(outline_file)
    conn = _open_db(data_dir)
    try:
        editor = _open_editor(SqliteProjectStore(conn), project_id)
        _report(editor.apply_outline(raw))
    finally:
        conn.close()


@app.command()
def add(
    project_id: str = typer.Argument(..., help="Project ID"),
    name: str = typer.Argument(..., help="Section name"),
    parent: Annotated[
        str | None,
        typer.Option("--parent", "-p", help="Parent section ID (default: new root section)"),
    ] = None,
    position: Annotated[
        int | None,
        typer.Option("--position", help="0-based position among siblings (default: last)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Add a section or sub-section."""
    conn = _open_db(data_dir)
    try:
        editor = _open_editor(SqliteProjectStore(conn), project_id)
        if parent is None:
            _report(editor.add_section(name, position=position))
        else:
            _report(editor.add_subsection(parent, name, position=position))
    finally:
        conn.close()


@app.command()
def rename(
    project_id: str = typer.Argument(..., help="Project ID"),
    section_id: str = typer.Argument(..., help="Section ID"),
    name: str = typer.Argument(..., help="New section name"),
    data_dir: DataDirOption = None,
) -> None:
    """Rename a section."""
    conn = _open_db(data_dir)
    try:
        _report(_open_editor(SqliteProjectStore(conn), project_id).rename_section(section_id, name))
    finally:
        conn.close()


@app.command()
def delete(
    project_id: str = typer.Argument(..., help="Project ID"),
    section_id: str = typer.Argument(..., help="Section ID"),
    data_dir: DataDirOption = None,
) -> None:
    """Delete a section and all of its sub-sections."""
    conn = _open_db(data_dir)
    try:
        _report(_open_editor(SqliteProjectStore(conn), project_id).delete_section(section_id))
    finally:
        conn.close()


@app.command(name="export")
def export_cmd(
    project_id: str = typer.Argument(..., help="Project ID"),
    data_dir: DataDirOption = None,
) -> None:
    """Print a project as JSON."""
    conn = _open_db(data_dir)
    try:
        project = _open_editor(SqliteProjectStore(conn), project_id).project
        typer.echo(json.dumps(project_to_dict(project), indent=2, ensure_ascii=False))
    finally:
        conn.close()
