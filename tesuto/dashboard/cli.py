"""Терминальная панель репетитора поверх Tesuto API.

Состояние панели эфемерно: после каждого изменения данные перечитываются
через API. Между запусками сохраняется только вошедший пользователь.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..client import TesutoClient, ApiError
from ..config import API_URL, SESSION_FILE
from ..generation import (
    ProblemGenerator, CannedProblemGenerator, GenerationRequest, GenerationDifficulty, GenerationStatus,
    generate_sync,
)
from ..models import AssignmentStatus, Role
from .session import SessionContext, NotAuthenticatedError

console = Console()

app = typer.Typer(help="Tesuto tutor dashboard", no_args_is_help=True)
subjects_app = typer.Typer(help="Manage subjects and their topics", no_args_is_help=True)
assignments_app = typer.Typer(help="Manage assignments", no_args_is_help=True)
app.add_typer(subjects_app, name="subjects")
app.add_typer(assignments_app, name="assignments")

STATUS_STYLES = {
    "DRAFT": "dim",
    "ACTIVE": "green",
    "COMPLETED": "blue",
    "ARCHIVED": "yellow",
}
DIFFICULTY_STYLES = {"EASY": "green", "MEDIUM": "yellow", "HARD": "red"}


@dataclass
class DashboardState:
    client: TesutoClient
    session: SessionContext
    generator: ProblemGenerator = field(default_factory=CannedProblemGenerator)


def _fail(message: str) -> None:
    console.print(f"[red]✗ {message}[/red]")
    raise typer.Exit(code=1)


def _state(ctx: typer.Context) -> DashboardState:
    return ctx.obj


def _tutor_id(state: DashboardState) -> str:
    try:
        return state.session.require_user().id
    except NotAuthenticatedError as e:
        _fail(str(e))


def _status(value) -> str:
    text = getattr(value, "value", value)
    return f"[{STATUS_STYLES.get(text, 'white')}]{text}[/]"


def _matches(search: Optional[str], *fields: Optional[str]) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(needle in (f or "").lower() for f in fields)


@app.callback()
def main(
        ctx: typer.Context,
        api_url: str = typer.Option(API_URL, "--api-url", envvar="TESUTO_API_URL", help="Tesuto API base URL"),
):
    if ctx.obj is None:
        ctx.obj = DashboardState(client=TesutoClient(api_url), session=SessionContext.load(SESSION_FILE))


# ========== SESSION ==========

@app.command()
def login(
        ctx: typer.Context,
        email: Optional[str] = typer.Option(None, "--email", "-e", help="Account email"),
        name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name"),
        offline: bool = typer.Option(True, "--offline/--no-offline", help="Fall back to a local identity"),
):
    """Sign in (creates the account on first use)."""
    state = _state(ctx)
    kwargs = {}
    if email:
        kwargs["email"] = email
    if name:
        kwargs["name"] = name
    try:
        user = state.session.login(state.client, allow_offline=offline, **kwargs)
    except ApiError as e:
        _fail(f"Login failed: {e.message}")

    if state.session.offline:
        console.print(f"[yellow]⚠ API unavailable ({state.session.error}), using local identity[/yellow]")
    console.print(f"[green]✓ Signed in as {user.name} <{user.email}>[/green]")


@app.command()
def logout(ctx: typer.Context):
    """Sign out and forget the stored identity."""
    _state(ctx).session.logout()
    console.print("[green]✓ Signed out[/green]")


@app.command()
def whoami(ctx: typer.Context):
    session = _state(ctx).session
    if not session.is_authenticated:
        console.print("[dim]Not signed in[/dim]")
        raise typer.Exit(code=1)
    user = session.user
    console.print(f"{user.name} <{user.email}> [dim]({user.role}, id {user.id})[/dim]")


@app.command()
def dashboard(ctx: typer.Context):
    """Overview of the tutor's subjects and assignments."""
    state = _state(ctx)
    tutor_id = _tutor_id(state)
    try:
        subjects = state.client.list_subjects(tutor_id=tutor_id)
        assignments = state.client.list_assignments(tutor_id=tutor_id)
    except ApiError as e:
        _fail(e.message)

    by_status = Counter(a.status.value for a in assignments)
    summary = "\n".join(
        [f"Subjects: {len(subjects)}", f"Assignments: {len(assignments)}"]
        + [f"  {_status(s.value)}: {by_status.get(s.value, 0)}" for s in AssignmentStatus]
    )
    console.print(Panel(summary, title=f"Welcome back, {state.session.user.name}"))

    table = Table(title="Recent assignments", show_header=True, header_style="bold")
    table.add_column("Title")
    table.add_column("Subject")
    table.add_column("Status", justify="center")
    table.add_column("Problems", justify="right")
    for a in assignments[:5]:
        table.add_row(a.title, a.subject.name if a.subject else "", _status(a.status), str(a.counts.problems))
    console.print(table)


# ========== STUDENTS ==========

@app.command()
def students(
        ctx: typer.Context,
        search: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by name or email"),
):
    """List registered students."""
    state = _state(ctx)
    _tutor_id(state)
    try:
        users = state.client.list_users()
    except ApiError as e:
        _fail(e.message)

    found = [u for u in users if u.role == Role.STUDENT and _matches(search, u.name, u.email)]
    if not found:
        console.print("[dim]No students found[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Assignments", justify="right")
    table.add_column("Joined")
    for u in found:
        table.add_row(u.name, u.email, str(u.counts.assignments), u.created_at.strftime("%Y-%m-%d"))
    console.print(table)


# ========== SUBJECTS ==========

def _print_subject(subject) -> None:
    header = f"{subject.icon or ''} {subject.name}".strip()
    console.print(Panel(subject.description or "[dim]No description[/dim]", title=header))
    if not subject.topics:
        console.print("[dim]No topics yet[/dim]")
    for topic in subject.topics:
        console.print(f"  {topic.order + 1}. {topic.name} [dim]({topic.id})[/dim]")


@subjects_app.command("list")
def subjects_list(
        ctx: typer.Context,
        search: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by name or description"),
):
    state = _state(ctx)
    try:
        subjects = state.client.list_subjects(tutor_id=_tutor_id(state))
    except ApiError as e:
        _fail(e.message)

    subjects = [s for s in subjects if _matches(search, s.name, s.description)]
    if not subjects:
        console.print("[dim]No subjects found[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Topics", justify="right")
    table.add_column("Assignments", justify="right")
    table.add_column("ID", style="dim")
    for s in subjects:
        table.add_row(f"{s.icon or ''} {s.name}".strip(), str(len(s.topics)), str(s.counts.assignments), s.id)
    console.print(table)


@subjects_app.command("show")
def subjects_show(ctx: typer.Context, subject_id: str = typer.Argument(..., help="Subject ID")):
    try:
        subject = _state(ctx).client.get_subject(subject_id)
    except ApiError as e:
        _fail(e.message)
    _print_subject(subject)
    for a in subject.assignments:
        console.print(f"  • {a.title} {_status(a.status)}")


@subjects_app.command("create")
def subjects_create(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Subject name"),
        description: Optional[str] = typer.Option(None, "--description", "-d"),
        icon: Optional[str] = typer.Option(None, "--icon"),
        color: Optional[str] = typer.Option(None, "--color"),
        topics: Optional[List[str]] = typer.Option(None, "--topic", "-t", help="Topic name (repeatable)"),
):
    state = _state(ctx)
    try:
        subject = state.client.create_subject(
            name=name,
            tutor_id=_tutor_id(state),
            description=description,
            icon=icon,
            color=color,
            topics=list(topics) if topics else None,
        )
    except ApiError as e:
        _fail(e.message)
    console.print(f"[green]✓ Created subject {subject.name}[/green] [dim]({subject.id})[/dim]")


@subjects_app.command("delete")
def subjects_delete(
        ctx: typer.Context,
        subject_id: str = typer.Argument(..., help="Subject ID"),
        yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    if not yes:
        typer.confirm("Delete this subject with all its topics and assignments?", abort=True)
    try:
        _state(ctx).client.delete_subject(subject_id)
    except ApiError as e:
        _fail(e.message)
    console.print("[green]✓ Subject deleted[/green]")


@subjects_app.command("add-topic")
def subjects_add_topic(
        ctx: typer.Context,
        subject_id: str = typer.Argument(..., help="Subject ID"),
        name: str = typer.Argument(..., help="Topic name"),
):
    client = _state(ctx).client
    try:
        topic = client.add_topic(subject_id, name)
        subject = client.get_subject(subject_id)
    except ApiError as e:
        _fail(e.message)
    console.print(f"[green]✓ Added topic {topic.name}[/green]")
    _print_subject(subject)


@subjects_app.command("remove-topic")
def subjects_remove_topic(
        ctx: typer.Context,
        subject_id: str = typer.Argument(..., help="Subject ID"),
        topic_id: str = typer.Argument(..., help="Topic ID"),
):
    client = _state(ctx).client
    try:
        client.delete_topic(subject_id, topic_id)
        subject = client.get_subject(subject_id)
    except ApiError as e:
        _fail(e.message)
    console.print("[green]✓ Topic removed[/green]")
    _print_subject(subject)


# ========== ASSIGNMENTS ==========

@assignments_app.command("list")
def assignments_list(
        ctx: typer.Context,
        search: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by title or description"),
        status: Optional[AssignmentStatus] = typer.Option(None, "--status", case_sensitive=False),
        subject_id: Optional[str] = typer.Option(None, "--subject", help="Subject ID"),
):
    state = _state(ctx)
    try:
        assignments = state.client.list_assignments(
            tutor_id=_tutor_id(state),
            subject_id=subject_id,
            status=status.value if status else None,
        )
    except ApiError as e:
        _fail(e.message)

    assignments = [a for a in assignments if _matches(search, a.title, a.description)]
    if not assignments:
        console.print("[dim]No assignments found[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Title")
    table.add_column("Subject")
    table.add_column("Due")
    table.add_column("Status", justify="center")
    table.add_column("Problems", justify="right")
    table.add_column("ID", style="dim")
    for a in assignments:
        due = a.due_date.strftime("%Y-%m-%d") if a.due_date else "-"
        subject = a.subject.name if a.subject else ""
        table.add_row(a.title, subject, due, _status(a.status), str(a.counts.problems), a.id)
    console.print(table)


@assignments_app.command("show")
def assignments_show(
        ctx: typer.Context,
        assignment_id: str = typer.Argument(..., help="Assignment ID"),
        answers: bool = typer.Option(False, "--answers", help="Show answers"),
):
    try:
        assignment = _state(ctx).client.get_assignment(assignment_id)
    except ApiError as e:
        _fail(e.message)

    due = assignment.due_date.strftime("%Y-%m-%d") if assignment.due_date else "no due date"
    subject = assignment.subject.name if assignment.subject else ""
    console.print(Panel(
        f"{assignment.description or ''}\n{subject} · {due} · {_status(assignment.status)}".strip(),
        title=assignment.title
    ))
    for p in assignment.problems:
        style = DIFFICULTY_STYLES.get(p.difficulty.value, "white")
        console.print(f"{p.order + 1}. {p.question} [{style}]{p.difficulty.value}[/]")
        if answers and p.answer:
            console.print(f"   [dim]Answer:[/dim] {p.answer}")


@assignments_app.command("create")
def assignments_create(
        ctx: typer.Context,
        title: str = typer.Argument(..., help="Assignment title"),
        subject_id: str = typer.Option(..., "--subject", help="Subject ID"),
        description: Optional[str] = typer.Option(None, "--description", "-d"),
        due: Optional[str] = typer.Option(None, "--due", help="Due date, e.g. 2025-06-01"),
        status: Optional[AssignmentStatus] = typer.Option(None, "--status", case_sensitive=False),
):
    state = _state(ctx)
    try:
        assignment = state.client.create_assignment(
            title=title,
            tutor_id=_tutor_id(state),
            subject_id=subject_id,
            description=description,
            due_date=due,
            status=status.value if status else None,
        )
    except ApiError as e:
        _fail(e.message)
    console.print(f"[green]✓ Created assignment {assignment.title}[/green] [dim]({assignment.id})[/dim]")


@assignments_app.command("set-status")
def assignments_set_status(
        ctx: typer.Context,
        assignment_id: str = typer.Argument(..., help="Assignment ID"),
        status: AssignmentStatus = typer.Argument(..., case_sensitive=False),
):
    try:
        assignment = _state(ctx).client.update_assignment(assignment_id, status=status.value)
    except ApiError as e:
        _fail(e.message)
    console.print(f"[green]✓ {assignment.title} is now[/green] {_status(assignment.status)}")


@assignments_app.command("delete")
def assignments_delete(
        ctx: typer.Context,
        assignment_id: str = typer.Argument(..., help="Assignment ID"),
        yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    if not yes:
        typer.confirm("Delete this assignment and its problems?", abort=True)
    try:
        _state(ctx).client.delete_assignment(assignment_id)
    except ApiError as e:
        _fail(e.message)
    console.print("[green]✓ Assignment deleted[/green]")


# ========== GENERATION ==========

@app.command()
def generate(
        ctx: typer.Context,
        subject: str = typer.Argument(..., help="Subject, e.g. math or physics"),
        topic: Optional[str] = typer.Option(None, "--topic", "-t"),
        difficulty: GenerationDifficulty = typer.Option(
            GenerationDifficulty.MIXED, "--difficulty", case_sensitive=False, help="Problem difficulty"
        ),
        count: int = typer.Option(5, "--count", "-c", min=1, max=20),
        instructions: Optional[str] = typer.Option(None, "--instructions", "-i"),
        save_to: Optional[str] = typer.Option(None, "--save-to", help="Append problems to this assignment"),
        answers: bool = typer.Option(False, "--answers", help="Show answers"),
):
    """Generate homework problems."""
    state = _state(ctx)
    request = GenerationRequest(
        subject=subject, topic=topic, difficulty=difficulty, count=count, instructions=instructions
    )

    with console.status("Generating problems..."):
        result = generate_sync(state.generator, request)

    if result.status != GenerationStatus.SUCCEEDED:
        _fail(f"Generation {result.status.value.replace('_', ' ')}: {result.error}")
    if not result.problems:
        console.print("[yellow]⚠ No problems match these settings[/yellow]")
        return

    for index, p in enumerate(result.problems, start=1):
        style = DIFFICULTY_STYLES.get(p.difficulty.value, "white")
        console.print(f"{index}. {p.question} [{style}]{p.difficulty.value}[/] [dim]{p.topic}[/dim]")
        if answers and p.answer:
            console.print(f"   [dim]Answer:[/dim] {p.answer}")

    if save_to:
        try:
            saved = state.client.add_problems(save_to, [p.to_problem_payload() for p in result.problems])
        except ApiError as e:
            _fail(e.message)
        console.print(f"[green]✓ Added {saved.count} problems to assignment {save_to}[/green]")


if __name__ == "__main__":
    app()
