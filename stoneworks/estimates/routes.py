# stoneworks/estimates/routes.py

from datetime import datetime

from flask import Blueprint, render_template, request, jsonify, url_for, redirect, flash
from stoneworks import get_controller
from stoneworks.estimates.forms import EstimateForm
from stoneworks.estimates.models import EstimateStatus, UnknownStatusError
from stoneworks.pricing import format_price

bp = Blueprint('estimates', __name__, url_prefix='/estimates')

INVALID_INPUT_MESSAGE = 'Invalid inputs. Please check your values.'


@bp.app_template_filter('due_date')
def format_due_date(value):
    """2025-03-01T09:30:00.000Z -> 2025-03-01 09:30 UTC; unparsable values pass through."""
    try:
        stamp = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return value
    if stamp.utcoffset() is not None and not stamp.utcoffset():
        return stamp.strftime('%Y-%m-%d %H:%M UTC')
    return stamp.strftime('%Y-%m-%d %H:%M')


def _render_page(form, status_code=200):
    ctl = get_controller()
    return render_template(
        'estimates/index.html',
        estimates=ctl.estimates.all(),
        tasks=ctl.tasks.all(),
        dangling={t.id for t in ctl.tasks if ctl.is_dangling(t)},
        form=form,
        price=form.price,
        format_price=format_price,
    ), status_code


def _render_edit(form, status_code=200):
    return render_template(
        'estimates/edit.html',
        form=form,
        price=form.price,
        statuses=list(EstimateStatus),
        format_price=format_price,
    ), status_code


@bp.route('/', methods=['GET'])
def list_estimates():
    get_controller().ensure_loaded()
    return _render_page(EstimateForm())


@bp.route('/', methods=['POST'])
def create_estimate():
    try:
        form = EstimateForm.from_mapping(request.form)
    except UnknownStatusError as e:
        flash(str(e), 'warning')
        return redirect(url_for('estimates.list_estimates'))

    if form.price is None:
        flash(INVALID_INPUT_MESSAGE, 'warning')
        return _render_page(form, 400)
    if get_controller().save(form) is None:
        # keep what the user typed so they can retry
        return _render_page(form, 502)
    return redirect(url_for('estimates.list_estimates'))


@bp.route('/<int:estimate_id>/edit', methods=['GET', 'POST'])
def edit_estimate(estimate_id):
    ctl = get_controller()
    ctl.ensure_loaded()
    est = ctl.estimates.get(estimate_id)
    if est is None:
        flash(f'Estimate #{estimate_id} not found', 'warning')
        return redirect(url_for('estimates.list_estimates'))

    if request.method == 'GET':
        return _render_edit(EstimateForm.from_estimate(est))

    try:
        form = EstimateForm.from_mapping(request.form, target_id=estimate_id)
    except UnknownStatusError as e:
        flash(str(e), 'warning')
        return redirect(url_for('estimates.edit_estimate', estimate_id=estimate_id))

    if form.price is None:
        flash(INVALID_INPUT_MESSAGE, 'warning')
        return _render_edit(form, 400)
    if ctl.save(form) is None:
        return _render_edit(form, 502)
    return redirect(url_for('estimates.list_estimates'))


@bp.route('/<int:estimate_id>/delete', methods=['POST'])
def delete_estimate(estimate_id):
    get_controller().delete_estimate(estimate_id)
    return redirect(url_for('estimates.list_estimates'))


@bp.route('/<int:estimate_id>/duplicate', methods=['POST'])
def duplicate_estimate(estimate_id):
    get_controller().duplicate_estimate(estimate_id)
    return redirect(url_for('estimates.list_estimates'))


@bp.route('/tasks/<int:task_id>/complete', methods=['POST'])
def complete_task(task_id):
    get_controller().complete_task(task_id)
    return redirect(url_for('estimates.list_estimates'))


@bp.route('/refresh', methods=['POST'])
def refresh():
    """Re-fetch estimates and tasks from the backend."""
    get_controller().load()
    return redirect(url_for('estimates.list_estimates'))


@bp.route('/price', methods=['POST'])
def price_preview():
    """
    Live price for the form currently on screen.
    Returns { valid, cost, display }; cost is null when the inputs are invalid.
    """
    data = request.get_json(silent=True) or request.form
    fields = {k: v for k, v in data.items() if k != 'status'}
    price = EstimateForm.from_mapping(fields).price
    return jsonify(
        valid=price is not None,
        cost=price,
        display=format_price(price) if price is not None else INVALID_INPUT_MESSAGE,
    )
