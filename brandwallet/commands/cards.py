"""
CLI Commands for wallet card evaluation.

Evaluation is idempotent, so the batch command is safe to run from cron:

# Catch up unlock notifications (every 15 minutes)
*/15 * * * * cd /app && flask cards evaluate --brand-id=1
"""

import click
from flask.cli import with_appcontext
from ..extensions import db
from ..models import Brand
from ..services.card_progress_service import CardProgressService
from ..utils.exceptions import WalletCardNotFoundError


@click.group('cards')
def cards_cli():
    """Wallet card commands."""
    pass


@cards_cli.command('evaluate')
@click.option('--brand-id', type=int, required=True, help='Brand to evaluate')
@click.option('--user-id', type=int, multiple=True, help='Only these users (repeatable)')
@click.option('--dry-run', is_flag=True, help='Preview without sending notifications')
@with_appcontext
def evaluate_cards(brand_id, user_id, dry_run):
    """
    Evaluate wallet cards and send pending unlock notifications.
    """
    brand = db.session.get(Brand, brand_id)
    if not brand:
        click.echo(f"Brand {brand_id} not found")
        return

    prefix = '[DRY RUN] ' if dry_run else ''
    click.echo(f"{prefix}Evaluating cards for brand: {brand.slug}")

    result = CardProgressService(brand.id).evaluate_brand(
        user_ids=list(user_id) if user_id else None,
        dry_run=dry_run
    )

    click.echo(f"  Checked: {result['checked']} cards")
    if dry_run:
        click.echo(f"  Pending: {result['pending']} notifications")
    else:
        click.echo(f"  Notified: {result['notified']} unlocks")

    if result['errors']:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result['errors'][:5]:
            click.echo(f"    - User {error['user_id']}: {error['error']}")


@cards_cli.command('progress')
@click.option('--brand-id', type=int, required=True, help='Brand ID')
@click.option('--user-id', type=int, required=True, help='Member user ID')
@with_appcontext
def show_progress(brand_id, user_id):
    """Show a member's progress toward every card tier."""
    try:
        result = CardProgressService(brand_id).get_member_progress(user_id)
    except WalletCardNotFoundError:
        click.echo(f"User {user_id} has no wallet card with brand {brand_id}")
        return

    click.echo(f"Member {result['card']['member_id']} (tier: {result['card']['tier']})")
    for template in result['templates']:
        status = 'UNLOCKED' if template['unlocked'] else 'locked'
        click.echo(f"  {template['name']} [{template['tier']}]: {status}")

        if template['progress'] is None:
            click.echo("    manual assignment only")
            continue
        for condition in template['progress']:
            mark = 'x' if condition['met'] else ' '
            click.echo(
                f"    [{mark}] {condition.get('type')}: "
                f"{condition['current']}/{condition['required']}"
            )


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(cards_cli)
