"""
SmartHire Command Line Interface

Provides CLI commands for running the hiring pipeline: submitting
applications, moving them through stages, listing them and getting
skill-based job recommendations.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from bson.errors import InvalidId
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="smarthire",
    help="SmartHire hiring pipeline CLI",
    add_completion=False,
)
console = Console()


def _fail(error: Exception) -> None:
    """Print an error in red and exit with status 1."""
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


def _require_connection() -> None:
    from smarthire.data.database import get_database_manager

    if not get_database_manager().check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB. Run 'init-db' first.[/red]")
        raise typer.Exit(1)


def _stage_style(stage: str) -> str:
    from smarthire.utils.constants import ApplicationStage

    stage = ApplicationStage.parse(stage)
    if stage is ApplicationStage.HIRED:
        return f"[green]{stage.label}[/green]"
    if stage in (ApplicationStage.REJECTED, ApplicationStage.WITHDRAWN):
        return f"[red]{stage.label}[/red]"
    return f"[cyan]{stage.label}[/cyan]"


def _score_style(score: int) -> str:
    if score >= 70:
        return f"[green]{score}%[/green]"
    if score >= 40:
        return f"[yellow]{score}%[/yellow]"
    return f"[red]{score}%[/red]"


@app.callback()
def main():
    """Initialize logging before any command runs."""
    from smarthire.utils.logger import setup_logging

    setup_logging()


@app.command()
def version():
    """Show application version."""
    from smarthire import __version__, __app_name__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show system information and configuration."""
    from smarthire.utils.config import get_settings

    settings = get_settings()

    table = Table(title="SmartHire Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Upload Directory", str(settings.storage.upload_dir))
    table.add_row("Email Enabled", str(settings.email.enabled))
    table.add_row("Recommendation Limit", str(settings.matching.recommendation_limit))
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Initialize the database with required collections and indexes."""
    import asyncio
    from smarthire.data.database import get_database_manager

    console.print("[yellow]Initializing database...[/yellow]")

    db_manager = get_database_manager()

    console.print("  Checking database connection...")
    if not db_manager.check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB.[/red]")
        console.print("[dim]Make sure MongoDB is running and connection settings are correct.[/dim]")
        raise typer.Exit(1)

    console.print("  [green]✓[/green] Connected to MongoDB")

    try:
        console.print("  Creating indexes...")
        asyncio.run(db_manager.ensure_indexes())
        console.print("  [green]✓[/green] Indexes created")
    except Exception as e:
        console.print(f"[red]Error initializing database: {e}[/red]")
        raise typer.Exit(1)

    console.print("\n[green]Database initialized successfully![/green]")


@app.command()
def health_check():
    """Check system health and component status."""
    from smarthire.data.database import get_database_manager
    from smarthire.utils.config import get_settings

    console.print("[bold cyan]System Health Check[/bold cyan]")
    console.print(f"[dim]{'─' * 50}[/dim]")

    settings = get_settings()
    all_healthy = True

    console.print("\n[bold]Database:[/bold]")
    db_manager = get_database_manager()
    if db_manager.check_sync_connection():
        console.print("  [green]✓[/green] MongoDB connected")
        console.print(f"    Host: {settings.database.host}:{settings.database.port}")
        console.print(f"    Database: {settings.database.name}")
    else:
        console.print("  [red]✗[/red] MongoDB not connected")
        all_healthy = False

    console.print("\n[bold]Storage:[/bold]")
    upload_dir = settings.storage.upload_dir
    if upload_dir.exists():
        console.print(f"  [green]✓[/green] Upload directory: {upload_dir}")
    else:
        console.print(f"  [yellow]○[/yellow] Upload directory will be created: {upload_dir}")

    console.print("\n[bold]Email:[/bold]")
    if settings.email.enabled:
        console.print(f"  [green]✓[/green] SMTP configured ({settings.email.smtp_host})")
    else:
        console.print("  [yellow]○[/yellow] SMTP not configured, emails disabled")

    console.print(f"\n[dim]{'─' * 50}[/dim]")
    if all_healthy:
        console.print("[green]All critical systems operational.[/green]")
    else:
        console.print("[red]Some systems require attention.[/red]")


@app.command()
def stats(
    job: Optional[str] = typer.Option(None, "--job", "-j", help="Break applications of a job down by stage"),
):
    """Show platform statistics."""
    from smarthire.core.exceptions import NotFoundError
    from smarthire.data.repositories import (
        get_application_repository,
        get_job_repository,
        get_user_repository,
    )
    from smarthire.utils.constants import ApplicationStage

    _require_connection()

    table = Table(title="SmartHire Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="green")

    table.add_row("Users", str(get_user_repository().count()))
    table.add_row("Jobs", str(get_job_repository().count()))
    table.add_row("Applications", str(get_application_repository().count()))
    console.print(table)

    if not job:
        return

    try:
        if get_job_repository().get_by_id(job) is None:
            raise NotFoundError("job", job)
    except (NotFoundError, InvalidId) as e:
        _fail(e)

    counts = get_application_repository().get_stage_counts_for_job(job)
    stages = Table(title=f"Pipeline for job {job}")
    stages.add_column("Stage")
    stages.add_column("Applications", justify="right")
    for stage in ApplicationStage:
        stages.add_row(_stage_style(stage.value), str(counts.get(stage.value, 0)))
    console.print(stages)


@app.command()
def post_job(
    title: str = typer.Argument(..., help="Job title"),
    recruiter: str = typer.Option(..., "--recruiter", "-r", help="Recruiter or admin user ID"),
    description: str = typer.Option("", "--description", "-d", help="Job description"),
    requirements: str = typer.Option("", "--requirements", help="Free-text requirements"),
    skills: Optional[str] = typer.Option(None, "--skills", "-s", help="Comma-separated required skills"),
    company: Optional[str] = typer.Option(None, "--company", help="Company name"),
    location: Optional[str] = typer.Option(None, "--location", help="Job location"),
    employment_type: str = typer.Option("Full-time", "--type", help="Employment type"),
    salary: Optional[float] = typer.Option(None, "--salary", help="Salary"),
):
    """Post a new job on behalf of a recruiter."""
    from pydantic import ValidationError as PydanticValidationError

    from smarthire.core.exceptions import SmartHireError
    from smarthire.core.matching import parse_skills
    from smarthire.data.models import JobCreate
    from smarthire.data.repositories import get_job_repository, get_user_repository
    from smarthire.services import require_role
    from smarthire.utils.constants import UserRole

    _require_connection()

    try:
        require_role(get_user_repository().get_by_id(recruiter), UserRole.RECRUITER, UserRole.ADMIN)
        data = JobCreate(
            title=title,
            description=description,
            requirements=requirements,
            company_name=company,
            location=location,
            employment_type=employment_type,
            salary=salary,
            required_skills=parse_skills(skills) or [],
        )
        job = get_job_repository().create_from_schema(data, recruiter)
    except (SmartHireError, InvalidId, PydanticValidationError) as e:
        _fail(e)

    console.print(f"[green]✓[/green] Job posted: [cyan]{job.id}[/cyan] {job.title}")
    if job.required_skills:
        console.print(f"  Required skills: {', '.join(job.required_skills)}")


@app.command()
def jobs(
    recruiter: Optional[str] = typer.Option(None, "--recruiter", "-r", help="Only jobs posted by this user"),
):
    """List job postings."""
    from smarthire.data.repositories import get_job_repository

    _require_connection()

    repository = get_job_repository()
    try:
        results = repository.get_by_recruiter(recruiter) if recruiter else repository.get_all_jobs()
    except InvalidId as e:
        _fail(e)

    if not results:
        console.print("[yellow]No jobs found.[/yellow]")
        return

    table = Table(title="Jobs")
    table.add_column("Job", style="cyan")
    table.add_column("Title")
    table.add_column("Company")
    table.add_column("Skills", style="dim")
    table.add_column("Applicants", justify="right")

    for job in results:
        table.add_row(
            str(job.id),
            job.title,
            job.company_name or "-",
            ", ".join(job.required_skills) or "[dim]free text[/dim]",
            str(job.applicant_count),
        )

    console.print(table)


@app.command()
def notifications(
    user_id: str = typer.Argument(..., help="User ID"),
    unread: bool = typer.Option(False, "--unread", "-u", help="Only unread notifications"),
    mark_read: bool = typer.Option(False, "--mark-read", help="Mark the listed notifications as read"),
):
    """List a user's notifications."""
    from smarthire.data.repositories import get_notification_repository

    _require_connection()

    repository = get_notification_repository()
    try:
        results = repository.get_for_user(user_id, unread_only=unread)
    except InvalidId as e:
        _fail(e)

    if not results:
        console.print("[yellow]No notifications.[/yellow]")
        return

    table = Table(title=f"Notifications for {user_id}")
    table.add_column("When", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Message")
    table.add_column("Read", justify="center")

    for notification in results:
        table.add_row(
            notification.created_at.strftime("%Y-%m-%d %H:%M"),
            notification.type,
            notification.message,
            "✓" if notification.read else "",
        )
        if mark_read and not notification.read:
            repository.mark_as_read(notification.id)

    console.print(table)


@app.command()
def apply(
    job_id: str = typer.Argument(..., help="Job ID"),
    applicant_id: str = typer.Argument(..., help="Candidate user ID"),
    resume: Path = typer.Option(..., "--resume", "-r", help="Resume PDF file"),
):
    """Submit an application for a job."""
    from smarthire.core.exceptions import SmartHireError
    from smarthire.core.workflow import get_workflow_engine
    from smarthire.data.repositories import get_user_repository
    from smarthire.services import get_resume_storage, require_role
    from smarthire.utils.constants import UserRole

    _require_connection()

    try:
        applicant = get_user_repository().get_by_id(applicant_id)
        require_role(applicant, UserRole.CANDIDATE)
        resume_ref = get_resume_storage().save_file(resume)
        application = get_workflow_engine().submit_application(job_id, applicant_id, resume_ref)
    except (SmartHireError, InvalidId) as e:
        _fail(e)

    console.print(f"[green]✓[/green] Application submitted: [cyan]{application.id}[/cyan]")
    console.print(f"  Match score: {_score_style(application.match_score)}")


@app.command()
def move(
    application_id: str = typer.Argument(..., help="Application ID"),
    stage: str = typer.Argument(..., help="Target stage (e.g. screening, hr_review)"),
    actor: str = typer.Option(..., "--actor", "-a", help="Recruiter or admin user ID"),
    comments: Optional[str] = typer.Option(None, "--comments", "-c", help="Comment for the stage history"),
    interview_at: Optional[datetime] = typer.Option(None, "--interview-at", help="Interview date/time"),
    interview_link: Optional[str] = typer.Option(None, "--interview-link", help="Meeting link"),
    interview_notes: Optional[str] = typer.Option(None, "--interview-notes", help="Interview notes"),
    salary: Optional[float] = typer.Option(None, "--salary", help="Offered salary"),
    currency: str = typer.Option("USD", "--currency", help="Offer currency"),
    joining_date: Optional[datetime] = typer.Option(None, "--joining-date", help="Offer joining date"),
):
    """Move an application to another stage."""
    from smarthire.core.exceptions import SmartHireError
    from smarthire.core.workflow import get_workflow_engine
    from smarthire.data.repositories import get_user_repository
    from smarthire.services import require_role
    from smarthire.utils.constants import UserRole

    _require_connection()

    interview = None
    if interview_at or interview_link or interview_notes:
        interview = {"scheduled_at": interview_at, "link": interview_link, "notes": interview_notes}

    offer = None
    if salary is not None or joining_date:
        offer = {"salary": salary, "currency": currency, "joining_date": joining_date}

    try:
        require_role(get_user_repository().get_by_id(actor), UserRole.RECRUITER, UserRole.ADMIN)
        application = get_workflow_engine().transition_stage(
            application_id,
            stage,
            actor_id=actor,
            comments=comments,
            interview=interview,
            offer=offer,
        )
    except (SmartHireError, InvalidId) as e:
        _fail(e)

    console.print(
        f"[green]✓[/green] Application [cyan]{application.id}[/cyan] "
        f"moved to {_stage_style(application.current_stage)}"
    )


@app.command()
def applications(
    job: Optional[str] = typer.Option(None, "--job", "-j", help="List applications for a job"),
    candidate: Optional[str] = typer.Option(None, "--candidate", "-c", help="List a candidate's applications"),
):
    """List applications for a job or a candidate, or show one candidate's application for a job."""
    from smarthire.core.exceptions import SmartHireError
    from smarthire.core.workflow import get_workflow_engine

    if not job and not candidate:
        console.print("[red]Error: Pass --job, --candidate or both.[/red]")
        raise typer.Exit(1)

    _require_connection()
    engine = get_workflow_engine()

    try:
        if job and candidate:
            results = [engine.get_application_for(job, candidate)]
            title = f"Application of candidate {candidate} for job {job}"
        elif job:
            results = engine.list_job_applications(job)
            title = f"Applications for job {job}"
        else:
            results = engine.list_candidate_applications(candidate)
            title = f"Applications of candidate {candidate}"
    except SmartHireError as e:
        _fail(e)

    if not results:
        console.print("[yellow]No applications found.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("Application", style="cyan")
    table.add_column("Job" if candidate else "Applicant")
    table.add_column("Stage")
    table.add_column("Match", justify="right")
    table.add_column("Submitted", style="dim")

    for application in results:
        table.add_row(
            str(application.id),
            str(application.job_id if candidate else application.applicant_id),
            _stage_style(application.current_stage),
            _score_style(application.match_score),
            application.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@app.command()
def show_application(
    application_id: str = typer.Argument(..., help="Application ID"),
):
    """Show an application with its stage history."""
    from smarthire.core.exceptions import SmartHireError
    from smarthire.core.workflow import allowed_transitions, get_workflow_engine

    _require_connection()

    try:
        application = get_workflow_engine().get_application(application_id)
    except SmartHireError as e:
        _fail(e)

    console.print(f"[bold]Application {application.id}[/bold]")
    console.print(f"  Job: {application.job_id}")
    console.print(f"  Applicant: {application.applicant_id}")
    console.print(f"  Stage: {_stage_style(application.current_stage)}")
    console.print(f"  Match score: {_score_style(application.match_score)}")
    console.print(f"  Resume: [dim]{application.resume}[/dim]")

    if application.interview:
        interview = application.interview
        console.print(f"  Interview: {interview.scheduled_at or 'unscheduled'} {interview.link or ''}")
    if application.offer:
        offer = application.offer
        console.print(f"  Offer: {offer.salary} {offer.currency} ({offer.status})")

    next_stages = sorted(s.value for s in allowed_transitions(application.current_stage))
    console.print(f"  Next stages: {', '.join(next_stages) if next_stages else '[dim]none (closed)[/dim]'}")

    table = Table(title="Stage History")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Stage")
    table.add_column("When")
    table.add_column("By", style="dim")
    table.add_column("Comments")

    for i, entry in enumerate(application.stage_history, 1):
        table.add_row(
            str(i),
            _stage_style(entry.stage),
            entry.entered_at.strftime("%Y-%m-%d %H:%M"),
            str(entry.updated_by or "system"),
            entry.comments,
        )

    console.print(table)


@app.command()
def recommend(
    candidate_id: Optional[str] = typer.Argument(None, help="Candidate user ID"),
    skills: Optional[str] = typer.Option(None, "--skills", "-s", help="Comma-separated skills"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum number of jobs"),
):
    """Recommend jobs by skill match."""
    from smarthire.core.exceptions import SmartHireError
    from smarthire.core.matching import get_recommendation_ranker

    _require_connection()

    try:
        ranked = get_recommendation_ranker().recommend(candidate_id, skills, limit)
    except SmartHireError as e:
        _fail(e)

    if not ranked:
        console.print("[yellow]No jobs found.[/yellow]")
        return

    table = Table(title="Recommended Jobs")
    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Job", style="cyan")
    table.add_column("Title")
    table.add_column("Company")
    table.add_column("Match", justify="right")

    for rank, item in enumerate(ranked, 1):
        table.add_row(
            str(rank),
            str(item.job.id),
            item.job.title,
            item.job.company_name or "-",
            _score_style(item.score),
        )

    console.print(table)


@app.command()
def score(
    job_id: str = typer.Argument(..., help="Job ID"),
    candidate: Optional[str] = typer.Option(None, "--candidate", "-c", help="Candidate user ID"),
    skills: Optional[str] = typer.Option(None, "--skills", "-s", help="Comma-separated skills"),
):
    """Score one job against a candidate's skills."""
    from smarthire.core.exceptions import NotFoundError, SmartHireError, ValidationError
    from smarthire.core.matching import get_match_scorer, parse_skills
    from smarthire.data.repositories import get_job_repository, get_user_repository

    _require_connection()

    try:
        skill_list = parse_skills(skills)
        if skill_list is None:
            if not candidate:
                raise ValidationError("Pass --candidate or --skills")
            skill_list = get_user_repository().get_skills(candidate)
            if skill_list is None:
                raise NotFoundError("candidate", candidate)
        job = get_job_repository().get_by_id(job_id)
        if job is None:
            raise NotFoundError("job", job_id)
    except (SmartHireError, InvalidId) as e:
        _fail(e)

    evaluation = get_match_scorer().evaluate(job, skill_list)

    console.print(f"[bold]{job.title}[/bold]  {_score_style(evaluation.score)}")
    console.print(f"  Strategy: {evaluation.strategy.value}")
    if evaluation.matched_terms:
        console.print(f"  [green]Matched:[/green] {', '.join(evaluation.matched_terms)}")
    if evaluation.unmatched_terms:
        console.print(f"  [red]Unmatched:[/red] {', '.join(evaluation.unmatched_terms)}")


if __name__ == "__main__":
    app()
