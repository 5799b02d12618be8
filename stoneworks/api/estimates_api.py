"""HTTP client for the estimates/tasks REST backend."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from stoneworks.estimates.models import Estimate, Task

log = logging.getLogger(__name__)


class ApiError(Exception):
    """Any failed call to the backend: non-2xx, network error or bad body."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None) -> None:
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class EstimatesApi:
    def __init__(self, base_url: str = 'http://localhost:8080', timeout: int = 10) -> None:
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {'Content-Type': 'application/json', 'Accept': 'application/json'}
        )

    def _request(self, method: str, path: str, json: Any = None, log_error_body: bool = False) -> requests.Response:
        url = f'{self.base_url}{path}'
        try:
            r = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f'{method} {path} failed: {e}') from e
        if not 200 <= r.status_code < 300:
            payload = None
            if log_error_body:
                try:
                    payload = r.json()
                except ValueError:
                    payload = r.text
                log.error('Backend error on %s %s: %s', method, path, payload)
            raise ApiError(
                f'{method} {path} returned {r.status_code}',
                status_code=r.status_code,
                payload=payload,
            )
        return r

    def _json(self, r: requests.Response) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise ApiError(f'invalid JSON from {r.url}') from e

    def _decode(self, factory, data):
        try:
            return factory(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(f'unexpected record from backend: {e}', payload=data) from e

    # estimates

    def list_estimates(self) -> List[Estimate]:
        data = self._json(self._request('GET', '/estimates'))
        return [self._decode(Estimate.from_dict, row) for row in data or []]

    def create_estimate(self, estimate: Estimate) -> Estimate:
        r = self._request('POST', '/estimates', json=estimate.to_payload())
        return self._decode(Estimate.from_dict, self._json(r))

    def update_estimate(self, estimate_id: int, estimate: Estimate) -> Estimate:
        r = self._request('PUT', f'/estimates/{estimate_id}', json=estimate.to_payload())
        return self._decode(Estimate.from_dict, self._json(r))

    def delete_estimate(self, estimate_id: int) -> None:
        self._request('DELETE', f'/estimates/{estimate_id}')

    # tasks

    def list_tasks(self) -> List[Task]:
        data = self._json(self._request('GET', '/tasks'))
        return [self._decode(Task.from_dict, row) for row in data or []]

    def create_task(self, task: Task) -> Task:
        r = self._request('POST', '/tasks', json=task.to_payload())
        return self._decode(Task.from_dict, self._json(r))

    def complete_task(self, task_id: int) -> Dict[str, Any]:
        r = self._request(
            'PUT', f'/tasks/{task_id}/update', json={'completed': True}, log_error_body=True
        )
        if not r.content:
            return {}
        return self._json(r)
