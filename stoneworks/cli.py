"""``flask estimates`` / ``flask tasks`` commands."""
from __future__ import annotations

import click
from flask.cli import AppGroup

from stoneworks import get_controller
from stoneworks.estimates.forms import EstimateForm
from stoneworks.estimates.models import EstimateStatus
from stoneworks.pricing import DEFAULT_LABOR_COST, DEFAULT_TAX_RATE, format_price

STATUS_CHOICE = click.Choice([s.value for s in EstimateStatus])


def pricing_options(func):
    options = [
        click.option('--length', type=float, default=0.0, help='Length (cm)'),
        click.option('--width', type=float, default=0.0, help='Width (cm)'),
        click.option('--thickness', type=float, default=0.0, help='Thickness (cm)'),
        click.option('--material-cost', type=float, default=0.0, help='Material cost per cm³'),
        click.option('--edge-finish-cost', type=float, default=0.0),
        click.option('--labor-cost', type=float, default=DEFAULT_LABOR_COST, show_default=True),
        click.option('--tax-rate', type=float, default=DEFAULT_TAX_RATE, show_default=True, help='Percent'),
        click.option('--discount', type=float, default=0.0),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _fail() -> None:
    raise click.exceptions.Exit(1)


@click.group('estimates', cls=AppGroup)
def estimates_cli() -> None:
    """Estimate commands."""


@estimates_cli.command('list')
def list_command() -> None:
    ctl = get_controller()
    if not ctl.load():
        _fail()
    for est in ctl.estimates:
        click.echo(
            f'#{est.id}\t{est.material}\t{est.length:g} x {est.width:g} x {est.thickness:g}\t'
            f'{est.edge_finish}\t{format_price(est.cost)}\t{est.status.value}'
        )


@estimates_cli.command('price')
@pricing_options
def price_command(**params) -> None:
    price = EstimateForm(**params).price
    if price is None:
        click.echo('Invalid inputs. Please check your values.', err=True)
        _fail()
    click.echo(format_price(price))


@estimates_cli.command('create')
@click.option('--material', default='')
@click.option('--edge-finish', default='')
@click.option('--status', type=STATUS_CHOICE, default=EstimateStatus.PENDING.value, show_default=True)
@pricing_options
def create_command(status: str, **params) -> None:
    form = EstimateForm(status=EstimateStatus.parse(status), **params)
    if form.price is None:
        click.echo('Invalid inputs. Please check your values.', err=True)
        _fail()
    saved = get_controller().save(form)
    if saved is None:
        _fail()
    click.echo(f'#{saved.id} {format_price(saved.cost)} {saved.status.value}')


@estimates_cli.command('delete')
@click.argument('estimate_id', type=int)
def delete_command(estimate_id: int) -> None:
    if not get_controller().delete_estimate(estimate_id):
        _fail()


@estimates_cli.command('duplicate')
@click.argument('estimate_id', type=int)
def duplicate_command(estimate_id: int) -> None:
    ctl = get_controller()
    ctl.ensure_loaded()
    if ctl.duplicate_estimate(estimate_id) is None:
        _fail()


@click.group('tasks', cls=AppGroup)
def tasks_cli() -> None:
    """Follow-up task commands."""


@tasks_cli.command('list')
@click.option('--open', 'only_open', is_flag=True, help='Hide completed tasks')
def list_tasks_command(only_open: bool) -> None:
    ctl = get_controller()
    if not ctl.load():
        _fail()
    for task in ctl.tasks:
        if only_open and task.completed:
            continue
        state = 'Completed' if task.completed else 'Pending'
        note = ' (estimate deleted)' if ctl.is_dangling(task) else ''
        click.echo(f'#{task.id}\testimate #{task.estimate_id}{note}\t{task.due_date}\t{state}')


@tasks_cli.command('complete')
@click.argument('task_id', type=int)
def complete_command(task_id: int) -> None:
    ctl = get_controller()
    ctl.ensure_loaded()
    if not ctl.complete_task(task_id):
        _fail()
