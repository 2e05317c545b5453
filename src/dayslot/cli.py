"""Dayslot CLI - day planner."""

import json
import logging
import sys
from datetime import date, datetime
from zoneinfo import ZoneInfo

import click

from .adapters.file_store import StoreError
from .config import load_config
from .core.calendar import format_minutes, parse_hhmm
from .core.preferences import parse_time_preference
from .core.tasks import Task, find_task, sort_by_priority
from .workflows import (
    ApplyError,
    apply_plan,
    gather_events,
    get_google_calendar,
    get_store,
    get_sync,
    plan_day,
    remove_event,
    unscheduled_tasks,
)


@click.group()
@click.version_option(package_name="dayslot")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Dayslot - fit your backlog into today's calendar."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def backlog(as_json: bool):
    """List backlog tasks, most urgent first."""
    config = load_config()
    try:
        tasks = sort_by_priority(get_store(config).fetch_backlog())
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in tasks], indent=2))
        return

    if not tasks:
        click.echo("Backlog is empty.")
        return

    for task in tasks:
        when = f" ({task.time_preference})" if task.time_preference else ""
        click.echo(f"[{task.priority:>3}] {task.title} - {task.duration} min{when}")


@main.command()
@click.argument("title")
@click.option("--duration", type=int, default=30, show_default=True, help="Minutes")
@click.option("--priority", type=int, default=None, help="Lower is more urgent")
@click.option("--when", "time_preference", default=None, help='Time preference, e.g. "after lunch"')
@click.option("--location", default=None)
@click.option("--id", "task_id", default=None, help="Stable task id (generated if omitted)")
def add(title: str, duration: int, priority: int | None, time_preference: str | None, location: str | None, task_id: str | None):
    """Add a task to the backlog."""
    config = load_config()
    task = Task.from_dict(
        {
            "id": task_id,
            "title": title,
            "duration": duration,
            "priority": priority,
            "time_preference": time_preference,
            "location": location,
        }
    )
    try:
        get_store(config).add_task(task)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Added {task.title} ({task.id})")


@main.command()
@click.argument("text")
def pref(text: str):
    """Show how a time preference is understood."""
    parsed = parse_time_preference(text)
    if parsed is None:
        click.echo("No preference.")
    elif parsed.exact:
        click.echo(f"Pinned at {format_minutes(parsed.anchor_minute)}")
    else:
        click.echo(f"Not before {format_minutes(parsed.anchor_minute)}")


@main.command()
@click.option("--date", "target", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Day to plan (default: today)")
@click.option("--now", "now_str", default=None, help="Override current time (HH:MM)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--apply", "do_apply", is_flag=True, help="Save the plan as events and clear placed tasks")
@click.option("--no-sync", is_flag=True, help="Skip the external calendar")
def plan(target: datetime | None, now_str: str | None, as_json: bool, do_apply: bool, no_sync: bool):
    """Plan backlog tasks into free time."""
    config = load_config()
    tz = ZoneInfo(config.timezone)

    now = datetime.now(tz)
    if now_str:
        try:
            minutes = parse_hhmm(now_str)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--now")
        now = now.replace(hour=minutes // 60, minute=minutes % 60, second=0, microsecond=0)
    target_date: date = target.date() if target else now.date()

    store = get_store(config)
    sync = None if no_sync else get_sync(config)
    try:
        tasks = store.fetch_backlog()
        events = gather_events(store, sync, target_date)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    result = plan_day(tasks, events, target_date=target_date, now=now)
    left_out = unscheduled_tasks(tasks, result)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "date": target_date.isoformat(),
                    "strategy": result.strategy,
                    "assignments": result.to_dicts(),
                    "unscheduled": [t.id for t in left_out],
                },
                indent=2,
            )
        )
    else:
        click.echo(f"### {target_date.strftime('%A, %B %d')}")
        if not result.assignments:
            click.echo("Nothing fits.")
        for assignment in result:
            task = find_task(tasks, assignment.task_id)
            click.echo(f"  {assignment.start_time}-{assignment.end_time}  {task.title}")
        if left_out:
            click.echo(f"\nNot scheduled: {', '.join(t.title for t in left_out)}")

    if do_apply and result.assignments:
        try:
            created = apply_plan(result, tasks, store, sync=sync, tz=tz)
        except ApplyError as e:
            click.echo(f"Error: {e}", err=True)
            if e.created:
                click.echo("Run 'dayslot events' to review what was saved.", err=True)
            sys.exit(1)
        click.echo(f"Scheduled {len(created)} task{'s' if len(created) != 1 else ''}", err=as_json)

@main.command()
@click.option("--date", "target", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Day to show (default: today)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def events(target: datetime | None, as_json: bool):
    """List placed events for a day."""
    config = load_config()
    target_date: date = target.date() if target else datetime.now(ZoneInfo(config.timezone)).date()
    try:
        day = get_store(config).fetch_day(target_date)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in day], indent=2))
        return

    if not day:
        click.echo("No events.")
        return

    for event in day:
        minutes = event.duration_minutes()
        length = f" ({minutes} min)" if minutes is not None and not event.all_day else ""
        click.echo(f"  {event.format_time()}  {event.title}{length}  [{event.id}]")


@main.command()
@click.argument("event_id")
@click.option("--no-sync", is_flag=True, help="Leave the external calendar alone")
def unplan(event_id: str, no_sync: bool):
    """Remove a placed event."""
    config = load_config()
    sync = None if no_sync else get_sync(config)
    try:
        removed = remove_event(event_id, get_store(config), sync=sync)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if removed is None:
        click.echo(f"Error: no event {event_id}", err=True)
        sys.exit(1)
    click.echo(f"Removed {removed.title}")

@main.command("cal-auth")
def cal_auth():
    """Authenticate with Google Calendar."""
    config = load_config()
    adapter = get_google_calendar(config)
    if not adapter.authenticate():
        click.echo("Error: Google Calendar authentication failed", err=True)
        sys.exit(1)
    click.echo("Google Calendar connected.")
