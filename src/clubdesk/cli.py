"""clubdesk CLI - activity status and participant tracking."""

import json
import logging
import sys

import click
import requests

from .adapters.club_api import AuthenticationError
from .config import load_config
from .core.activity import InvalidInputError, SlotName
from .core.dashboard import format_activity_line, format_dashboard, format_participant_line
from .core.listing import APPROVAL_FILTERS, BUCKETS, ListingEntry
from .workflows import build_dashboard, get_repository, participant_views, slot_conflicts

_ERRORS = (AuthenticationError, InvalidInputError, LookupError, RuntimeError, requests.RequestException)

when_option = click.option(
    "--when",
    "bucket",
    type=click.Choice(BUCKETS),
    default="all",
    show_default=True,
    help="Temporal bucket",
)
approval_option = click.option(
    "--approval",
    type=click.Choice(APPROVAL_FILTERS),
    default="all",
    show_default=True,
    help="Approval status",
)
file_option = click.option(
    "--file",
    "activities_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Read activities from a JSON export instead of the API",
)


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _entry_json(entry: ListingEntry) -> dict:
    activity = entry.activity
    data = {
        "id": activity.id,
        "name": activity.name,
        "date": activity.date.isoformat() if activity.date else None,
        "end_date": activity.end_date.isoformat() if activity.end_date else None,
        "status": entry.classification.status.value,
        "progress_percent": entry.classification.progress_percent,
    }
    view = entry.view
    if view is not None:
        data["approval_status"] = view.effective_approval_status.value
        data["registered_slots"] = view.registered_slot_summary
        data["capacity_percent"] = view.capacity_percent
        data["can_unregister"] = view.can_unregister
        data["can_check_in"] = view.can_check_in
    return data


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """clubdesk - student club activity tracker."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@when_option
@approval_option
@click.option("--mine", is_flag=True, help="Only activities I am actively registered for")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@file_option
def activities(bucket: str, approval: str, mine: bool, as_json: bool, activities_file: str | None):
    """List activities with their temporal status."""
    config = load_config()
    try:
        repo = get_repository(config, activities_file)
        data = build_dashboard(repo, config.user_id or None, bucket, approval, mine)
    except _ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "counts": data.bucket_counts,
                    "activities": [_entry_json(e) for e in data.entries],
                },
                indent=2,
            )
        )
        return

    if not data.entries:
        click.echo("No activities.")
        return

    for entry in data.entries:
        click.echo(format_activity_line(entry))


@main.command()
@click.argument("activity_id")
@approval_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@file_option
def participants(activity_id: str, approval: str, as_json: bool, activities_file: str | None):
    """List participants of an activity with available actions."""
    config = load_config()
    try:
        repo = get_repository(config, activities_file)
        rows = participant_views(repo, activity_id, config.user_id or None, approval)
    except _ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "user_id": p.user_id,
                        "name": p.name,
                        "email": p.email,
                        "approval_status": v.effective_approval_status.value,
                        "registered_slots": v.registered_slot_summary,
                        "slot_completeness_percent": v.slot_completeness_percent,
                        "can_approve": v.can_approve,
                        "can_reject": v.can_reject,
                        "can_remove": v.can_remove,
                        "rejection_reason": v.rejection_reason,
                    }
                    for p, v in rows
                ],
                indent=2,
            )
        )
        return

    if not rows:
        click.echo("No participants.")
        return

    for p, v in rows:
        click.echo(format_participant_line(p, v))


@main.command()
@when_option
@approval_option
@file_option
def dashboard(bucket: str, approval: str, activities_file: str | None):
    """Show counts per status and the filtered activity list."""
    config = load_config()
    try:
        repo = get_repository(config, activities_file)
        data = build_dashboard(repo, config.user_id or None, bucket, approval)
    except _ERRORS as e:
        _fail(e)
    click.echo(format_dashboard(data))


@main.command()
@click.argument("activity_id")
@click.argument("day", type=int)
@click.argument("slot", type=click.Choice([s.value for s in SlotName]))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@file_option
def conflicts(activity_id: str, day: int, slot: str, as_json: bool, activities_file: str | None):
    """Check a session against my other registrations."""
    config = load_config()
    try:
        repo = get_repository(config, activities_file)
        found = slot_conflicts(repo, activity_id, config.user_id or None, day, slot)
    except _ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "activity_id": c.activity.id,
                        "activity_name": c.activity.name,
                        "day": c.day,
                        "slot": c.slot.value,
                        "date": c.date.isoformat(),
                        "start_time": c.start_time,
                        "end_time": c.end_time,
                    }
                    for c in found
                ],
                indent=2,
            )
        )
        return

    if not found:
        click.echo("No conflicts.")
        return

    for c in found:
        times = f" {c.start_time}-{c.end_time}" if c.start_time else ""
        click.echo(f"{c.activity.name} - day {c.day} {c.slot.label}, {c.date.isoformat()}{times}")


@main.command()
@when_option
@click.option("--mine", is_flag=True, help="Only activities I am actively registered for")
@file_option
def watch(bucket: str, mine: bool, activities_file: str | None):
    """Re-evaluate activities every POLL_INTERVAL seconds."""
    from .watcher import setup_scheduler

    config = load_config()
    repo = get_repository(config, activities_file)

    def show(text: str) -> None:
        click.clear()
        click.echo(text)

    scheduler = setup_scheduler(repo, show, config, bucket=bucket, mine=mine)
    click.echo("Press Ctrl+C to stop")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        pass
