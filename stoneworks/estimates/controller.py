"""Estimate and follow-up task lifecycle.

The controller owns the in-memory mirrors of the backend's estimates and
tasks. Every mutation of those mirrors happens after the backend has
confirmed the request; a failed call leaves them untouched and is reported
through ``notify``.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

from stoneworks.api.estimates_api import ApiError, EstimatesApi
from stoneworks.estimates.forms import EstimateForm
from stoneworks.estimates.models import Estimate, EstimateStatus, Task

log = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]
R = TypeVar('R', Estimate, Task)


def utc_now_iso() -> str:
    """Current time as an ISO 8601 UTC string, e.g. 2025-03-01T09:30:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _log_notify(category: str, message: str) -> None:
    log.info('[%s] %s', category, message)


class _Collection(Generic[R]):
    """Ordered records keyed by ``id``; only the controller writes to it."""

    def __init__(self, items: Optional[List[R]] = None) -> None:
        self._items: List[R] = list(items or [])
        self._lock = threading.Lock()

    def __iter__(self) -> Iterator[R]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._items)

    def all(self) -> List[R]:
        with self._lock:
            return list(self._items)

    def ids(self) -> set:
        with self._lock:
            return {item.id for item in self._items}

    def get(self, record_id: int) -> Optional[R]:
        with self._lock:
            return next((i for i in self._items if i.id == record_id), None)

    def replace_all(self, items: List[R]) -> None:
        with self._lock:
            self._items = list(items)

    def append(self, item: R) -> None:
        with self._lock:
            self._items.append(item)

    def replace(self, record_id: int, item: R) -> None:
        with self._lock:
            self._items = [item if i.id == record_id else i for i in self._items]

    def remove(self, record_id: int) -> None:
        with self._lock:
            self._items = [i for i in self._items if i.id != record_id]


class EstimateCollection(_Collection[Estimate]):
    pass


class TaskCollection(_Collection[Task]):

    def mark_completed(self, task_id: int) -> None:
        with self._lock:
            for task in self._items:
                if task.id == task_id:
                    task.completed = True


class LifecycleController:

    def __init__(
        self,
        api: EstimatesApi,
        notify: Optional[Notifier] = None,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self.api = api
        self.notify = notify or _log_notify
        self.clock = clock
        self.estimates = EstimateCollection()
        self.tasks = TaskCollection()
        self.loaded = False

    def _fail(self, action: str, message: str, err: ApiError) -> None:
        log.error('%s failed: %s', action, err)
        self.notify('danger', message)

    # loading

    def load(self) -> bool:
        ok = True
        try:
            self.estimates.replace_all(self.api.list_estimates())
        except ApiError as e:
            self._fail('fetch estimates', 'Failed to fetch estimates', e)
            ok = False
        try:
            self.tasks.replace_all(self.api.list_tasks())
        except ApiError as e:
            self._fail('fetch tasks', 'Failed to fetch tasks', e)
            ok = False
        self.loaded = self.loaded or ok
        return ok

    def ensure_loaded(self) -> None:
        if not self.loaded:
            self.load()

    # estimates

    def save(self, form: EstimateForm) -> Optional[Estimate]:
        """Create or update depending on the form's mode.

        Returns the backend's record, or ``None`` when the inputs do not
        price or the backend refused the request.
        """
        estimate = form.to_estimate()
        if estimate is None:
            log.debug('save skipped: inputs do not produce a price')
            return None

        editing = form.target_id is not None
        try:
            if editing:
                saved = self.api.update_estimate(form.target_id, estimate.without_id())
            else:
                saved = self.api.create_estimate(estimate.without_id())
        except ApiError as e:
            verb = 'update' if editing else 'create'
            self._fail(f'{verb} estimate', 'Failed to save estimate', e)
            return None

        if editing:
            self.estimates.replace(form.target_id, saved)
            log.info('estimate %s updated (cost=%s status=%s)', saved.id, saved.cost, saved.status.value)
            self.notify('success', f'Estimate #{saved.id} updated')
        else:
            self.estimates.append(saved)
            log.info('estimate %s created (cost=%s status=%s)', saved.id, saved.cost, saved.status.value)
            self.notify('success', f'Estimate #{saved.id} created')

        # The submitted status decides, not the previous one, so re-saving a
        # Sent estimate adds another task.
        if estimate.status is EstimateStatus.SENT:
            self.create_task(saved.id, self.clock())
        return saved

    def delete_estimate(self, estimate_id: int) -> bool:
        # Tasks that reference the estimate are left alone.
        try:
            self.api.delete_estimate(estimate_id)
        except ApiError as e:
            self._fail('delete estimate', 'Failed to delete estimate', e)
            return False
        self.estimates.remove(estimate_id)
        log.info('estimate %s deleted', estimate_id)
        self.notify('success', f'Estimate #{estimate_id} deleted')
        return True

    def duplicate_estimate(self, estimate_id: int) -> Optional[Estimate]:
        """Copy an estimate as a new record.

        The copy keeps the source status. No follow-up task is created here
        even when that status is Sent; only ``save`` creates tasks.
        """
        source = self.estimates.get(estimate_id)
        if source is None:
            log.warning('duplicate requested for unknown estimate %s', estimate_id)
            self.notify('warning', f'Estimate #{estimate_id} not found')
            return None
        try:
            copy = self.api.create_estimate(source.without_id())
        except ApiError as e:
            self._fail('duplicate estimate', 'Failed to duplicate estimate', e)
            return None
        self.estimates.append(copy)
        log.info('estimate %s duplicated as %s', estimate_id, copy.id)
        self.notify('success', f'Estimate #{estimate_id} duplicated as #{copy.id}')
        return copy

    # tasks

    def create_task(self, estimate_id: int, due_date: str) -> Optional[Task]:
        try:
            task = self.api.create_task(Task(estimate_id=estimate_id, due_date=due_date, completed=False))
        except ApiError as e:
            self._fail('create task', 'Failed to create task', e)
            return None
        self.tasks.append(task)
        log.info('follow-up task %s created for estimate %s', task.id, estimate_id)
        self.notify('success', 'Task created successfully')
        return task

    def complete_task(self, task_id: int) -> bool:
        local = self.tasks.get(task_id)
        if local is not None and local.completed:
            return True
        try:
            self.api.complete_task(task_id)
        except ApiError as e:
            self._fail('update task', 'Failed to update task', e)
            return False
        self.tasks.mark_completed(task_id)
        log.info('task %s completed', task_id)
        self.notify('success', 'Task marked as completed')
        return True

    def is_dangling(self, task: Task) -> bool:
        return task.estimate_id not in self.estimates.ids()
