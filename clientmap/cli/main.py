#!/usr/bin/env python3
"""
Client Map Terminal CLI
Command-line interface over the client controller: list/search, add, edit,
delete (behind a confirmation), and render the client map.
"""

import logging
import re
import click
from typing import Optional

from clientmap.bus.events import EventBus
from clientmap.config import config
from clientmap.engine.controller import ClientController
from clientmap.engine.form import ClientForm
from clientmap.engine.geolocation import get_locator
from clientmap.engine.map_view import MapView
from clientmap.engine.sheets import SheetsAdapter
from clientmap.errors import ValidationError
from clientmap.models import (
    CATEGORY_CHOICES, STATUS_CHOICES, CATEGORY_LABELS, STATUS_LABELS,
    DEFAULT_CATEGORY, DEFAULT_STATUS,
)
from clientmap.logging_config import configure_logging, log_call

_EMAIL_RE = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def _build_controller(bus: Optional[EventBus] = None) -> ClientController:
    return ClientController(SheetsAdapter(), bus=bus, locator=get_locator())


def _echo_banner(controller: ClientController):
    banner = controller.banner
    if banner is None:
        return
    if banner.is_error:
        click.echo(f"✗ {banner.message}", err=True)
    else:
        click.echo(f"✓ {banner.message}")


def _as_text(value) -> str:
    return '' if value is None else str(value)


def _prompt_required(label: str, current: str) -> str:
    """Prompt until a non-blank value is given. The current value is offered as default."""
    while True:
        raw = click.prompt(f"{label} *", default=_as_text(current) or None, type=str, show_default=bool(current))
        if raw and raw.strip():
            return raw.strip()
        click.echo(f"  {label} is required.", err=True)


@log_call
def _prompt_email(current: str = '') -> str:
    """Prompt for an email address, re-prompting on bad format. Returns '' if left blank."""
    logger = logging.getLogger("clientmap")
    while True:
        raw = click.prompt("Email", default=_as_text(current), type=str, show_default=bool(current)) or ''
        if not raw:
            return ''
        if _EMAIL_RE.match(raw):
            return raw
        logger.debug(f"_prompt_email | rejected input={raw!r}")
        click.echo("  Invalid email address. Try again or press Enter to skip.", err=True)


def _prompt_optional(label: str, current: str) -> str:
    return click.prompt(label, default=_as_text(current), type=str, show_default=bool(current)) or ''


def _fill_form(form: ClientForm, controller: ClientController, gps: bool):
    """Walk the user through every field of the draft, one at a time."""
    d = form.draft
    click.echo(f"\n=== {form.title.upper()} ===\n")

    form.set_field('name', _prompt_required("Full name", d.name))
    form.set_field('phone', _prompt_required("Phone", d.phone))
    form.set_field('email', _prompt_email(d.email))
    form.set_field('company', _prompt_optional("Company", d.company))
    form.set_field('national_id', _prompt_optional("National ID", d.national_id))
    form.set_field('address', _prompt_optional("Address", d.address))
    form.set_field('category', click.prompt(
        "Category", type=click.Choice(CATEGORY_CHOICES),
        default=d.category if d.category in CATEGORY_CHOICES else DEFAULT_CATEGORY,
    ))
    form.set_field('status', click.prompt(
        "Status", type=click.Choice(STATUS_CHOICES),
        default=d.status if d.status in STATUS_CHOICES else DEFAULT_STATUS,
    ))
    form.set_field('notes', _prompt_optional("Notes", d.notes))

    if gps:
        click.echo("Locating...")
        form.geolocate()
        _echo_banner(controller)

    lat = f"{d.lat:.6f}" if d.lat else "---"
    lng = f"{d.lng:.6f}" if d.lng else "---"
    click.echo(f"Lat: {lat}  Lng: {lng}")


def _submit(form: ClientForm, controller: ClientController) -> bool:
    try:
        ok = form.submit()
    except ValidationError as e:
        logging.getLogger("clientmap").warning(f"form rejected: {e}")
        click.echo(f"Error: {e}", err=True)
        return False
    _echo_banner(controller)
    return ok


@click.group()
def cli():
    """Client Map - Client records on a shared sheet, with a map"""
    configure_logging()


# =============================================================================
# CLIENTS COMMANDS
# =============================================================================

@cli.group()
def clients():
    """Manage client records"""
    pass


@clients.command('list')
@click.option('--search', default='', help='Filter by name or company (case-insensitive)')
@log_call
def clients_list(search):
    """List clients, optionally filtered"""
    controller = _build_controller()
    click.echo("Loading data...")
    controller.load()
    _echo_banner(controller)

    controller.set_search(search)
    results = controller.filtered_clients

    if not results:
        click.echo("No clients found.")
        return

    click.echo(f"\nFound {len(results)} clients:\n")
    click.echo(f"{'ID':<8} {'Name':<28} {'Phone':<16} {'Company':<20} {'Status':<10} {'Map':<3}")
    click.echo("-" * 90)

    for c in results:
        click.echo(
            f"{str(c.id or ''):<8} {str(c.name or '')[:26]:<28} "
            f"{str(c.phone or '')[:14]:<16} {str(c.company or '-')[:18]:<20} "
            f"{str(c.status or ''):<10} {'✓' if c.has_location else '':<3}"
        )


@clients.command('show')
@click.argument('client_id')
@log_call
def clients_show(client_id):
    """Show full client details"""
    logger = logging.getLogger("clientmap")
    controller = _build_controller()
    controller.load()
    _echo_banner(controller)

    client = controller.get_client(client_id)
    if not client:
        logger.warning(f"clients_show | client_id={client_id} not found")
        click.echo(f"Client ID {client_id} not found.", err=True)
        return

    click.echo(f"\n{'='*80}")
    click.echo(f"CLIENT #{client.id}: {client.name}")
    click.echo(f"{'='*80}")
    click.echo(f"Phone:       {client.phone or '(not set)'}")
    click.echo(f"Email:       {client.email or '(not set)'}")
    click.echo(f"Company:     {client.company or '(not set)'}")
    click.echo(f"National ID: {client.national_id or '(not set)'}")
    click.echo(f"Address:     {client.address or '(not set)'}")
    click.echo(f"Category:    {CATEGORY_LABELS.get(client.category, client.category)}")
    click.echo(f"Status:      {STATUS_LABELS.get(client.status, client.status)}")
    if client.has_location:
        click.echo(f"Location:    {client.lat:.6f}, {client.lng:.6f}")
        click.echo(f"Directions:  {client.directions_url}")
    else:
        click.echo("Location:    (not set)")

    if client.notes:
        click.echo(f"\nNotes:\n{client.notes}")
    click.echo()


@clients.command('add')
@click.option('--gps', is_flag=True, help='Fill coordinates from the current device location')
@log_call
def clients_add(gps):
    """Add a new client (interactive)"""
    controller = _build_controller()
    form = controller.open_form()
    _fill_form(form, controller, gps)
    _submit(form, controller)


@clients.command('edit')
@click.argument('client_id')
@click.option('--gps', is_flag=True, help='Replace coordinates with the current device location')
@log_call
def clients_edit(client_id, gps):
    """Edit an existing client (interactive)"""
    logger = logging.getLogger("clientmap")
    controller = _build_controller()
    controller.load()
    _echo_banner(controller)

    client = controller.get_client(client_id)
    if not client:
        logger.warning(f"clients_edit | client_id={client_id} not found")
        click.echo(f"Client ID {client_id} not found.", err=True)
        return

    form = controller.open_form(client)
    _fill_form(form, controller, gps)
    _submit(form, controller)


@clients.command('delete')
@click.argument('client_id')
@click.option('--yes', is_flag=True, help='Skip the confirmation prompt')
@log_call
def clients_delete(client_id, yes):
    """Delete a client after confirmation"""
    logger = logging.getLogger("clientmap")
    controller = _build_controller()
    controller.load()
    _echo_banner(controller)

    client = controller.get_client(client_id)
    if not client:
        logger.warning(f"clients_delete | client_id={client_id} not found")
        click.echo(f"Client ID {client_id} not found.", err=True)
        return

    controller.request_delete(client_id)
    dialog = controller.dialog
    click.echo(f"\n⚠ {dialog.title}  ({client.name})")
    click.echo(dialog.message)

    if not yes and not click.confirm(dialog.confirm_label, default=False):
        controller.cancel_delete()
        click.echo("Cancelled.")
        return

    click.echo("Deleting...")
    controller.confirm_delete()
    _echo_banner(controller)


# =============================================================================
# MAP
# =============================================================================

@cli.command('map')
@click.option('--output', type=click.Path(dir_okay=False), default=None,
              help=f'HTML file to write (default: {config.MAP_OUTPUT})')
@click.option('--focus', 'focus_id', default=None, help='Client ID to highlight and zoom to')
@log_call
def map_command(output, focus_id):
    """Render all geolocated clients to an HTML map"""
    bus = EventBus()
    view = MapView()
    view.bind(bus)

    controller = _build_controller(bus=bus)
    loaded = controller.load()
    _echo_banner(controller)

    if focus_id:
        client = controller.get_client(focus_id)
        if client is None:
            click.echo(f"Client ID {focus_id} not found.", err=True)
        elif not client.has_location:
            click.echo(f"Client ID {focus_id} has no location.", err=True)
        else:
            controller.open_form(client)

    if not view.available:
        click.echo("Map unavailable (folium not installed). Writing placeholder.", err=True)

    try:
        path = view.save(output)
    except OSError as e:
        logging.getLogger("clientmap").error(f"map write failed: {e}", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        return

    if not loaded:
        click.echo(f"✗ Loading failed, map written without client markers to: {path}", err=True)
        return
    click.echo(f"✓ Map with {view.marker_count} clients written to: {path}")


# =============================================================================
# MAIN
# =============================================================================

if __name__ == '__main__':
    cli()
