# wigshop/cli.py
from datetime import datetime

import click
from flask import current_app
from flask.cli import with_appcontext

from .services import shop

@click.command("countdown-tick")
@click.option("--date", "on_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Run as if today were this date (YYYY-MM-DD).")
@with_appcontext
def countdown_tick(on_date):
    """Send due delivery-countdown emails and purge expired orders."""
    if current_app.config["ORDER_STORE"] != "sql":
        # this process has its own empty memory store, not the web server's orders
        raise click.ClickException(
            "countdown-tick needs ORDER_STORE=sql; in-memory orders live only in the web process"
        )
    now = on_date or datetime.now()
    result = shop().tracker.tick(now)
    for order_id, days_left in result.sent:
        click.echo(f"countdown sent: {order_id} ({days_left} days left)")
    for order_id in result.purged:
        click.echo(f"purged: {order_id}")
    for order_id in result.failed:
        click.echo(f"failed: {order_id}", err=True)
    click.echo(f"tick {now:%Y-%m-%d}: {len(result.sent)} sent, {len(result.purged)} purged")

@click.command("list-orders")
@with_appcontext
def list_orders():
    today = datetime.now()
    orders = shop().tracker.orders()
    if not orders:
        click.echo("no tracked orders"); return
    for o in orders:
        click.echo(f"{o.id}  {o.customer_email or '-'}  {o.total_display}  "
                   f"delivery {o.delivery_date:%Y-%m-%d}  days_left={o.days_left(today)}  "
                   f"emails_sent={o.emails_sent}")

def register_cli(app):
    app.cli.add_command(countdown_tick)
    app.cli.add_command(list_orders)
