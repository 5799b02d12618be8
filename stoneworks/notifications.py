"""User-visible notifications.

Inside a request they become flashed messages (rendered as toasts by the
page); from the command line they are echoed.
"""
import click
from flask import flash, has_request_context


def notify_user(category: str, message: str) -> None:
    if has_request_context():
        flash(message, category)
    else:
        click.echo(message, err=category == 'danger')
