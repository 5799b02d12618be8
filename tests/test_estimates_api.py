import os
import sys

import pytest
import requests

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from stoneworks.api.estimates_api import ApiError, EstimatesApi
from stoneworks.estimates.models import Estimate, EstimateStatus, Task


class DummyResponse:
    def __init__(self, status_code, data=None, content=b'{}'):
        self.status_code = status_code
        self._data = data
        self.content = content
        self.text = str(data)
        self.url = 'http://backend.test/x'

    def json(self):
        if self._data is None:
            raise ValueError('no json')
        return self._data


ESTIMATE_ROW = {
    'id': 4, 'material': 'Granite', 'length': 10, 'width': 5, 'thickness': 2,
    'edgeFinish': 'Polished', 'materialCost': 2, 'edgeFinishCost': 20,
    'laborCost': 50, 'taxRate': 10, 'discount': 5, 'cost': 292, 'status': 'Sent',
}


def make_client(monkeypatch, responses):
    client = EstimatesApi(base_url='http://backend.test/', timeout=3)
    calls = []

    def fake_request(method, url, json=None, timeout=None):
        calls.append((method, url, json, timeout))
        resp = responses[len(calls) - 1]
        if isinstance(resp, Exception):
            raise resp
        return resp

    monkeypatch.setattr(client.session, 'request', fake_request)
    return client, calls


def test_json_headers_and_base_url():
    client = EstimatesApi(base_url='http://backend.test/')
    assert client.base_url == 'http://backend.test'
    assert client.session.headers['Content-Type'] == 'application/json'


def test_list_estimates_decodes_camel_case(monkeypatch):
    client, calls = make_client(monkeypatch, [DummyResponse(200, [ESTIMATE_ROW])])
    rows = client.list_estimates()
    assert calls == [('GET', 'http://backend.test/estimates', None, 3)]
    est = rows[0]
    assert est.id == 4
    assert est.edge_finish == 'Polished'
    assert est.material_cost == 2.0
    assert est.status is EstimateStatus.SENT


def test_create_estimate_posts_payload_without_id(monkeypatch):
    client, calls = make_client(monkeypatch, [DummyResponse(201, ESTIMATE_ROW)])
    est = Estimate.from_dict(dict(ESTIMATE_ROW, id=None))
    saved = client.create_estimate(est)
    method, url, body, _ = calls[0]
    assert (method, url) == ('POST', 'http://backend.test/estimates')
    assert 'id' not in body
    assert body['edgeFinishCost'] == 20
    assert body['status'] == 'Sent'
    assert saved.id == 4


def test_update_estimate_puts_to_id(monkeypatch):
    client, calls = make_client(monkeypatch, [DummyResponse(200, ESTIMATE_ROW)])
    client.update_estimate(4, Estimate.from_dict(ESTIMATE_ROW).without_id())
    assert calls[0][:2] == ('PUT', 'http://backend.test/estimates/4')
    assert 'id' not in calls[0][2]


def test_delete_ignores_empty_body(monkeypatch):
    client, calls = make_client(monkeypatch, [DummyResponse(204, None, content=b'')])
    client.delete_estimate(4)
    assert calls[0][:2] == ('DELETE', 'http://backend.test/estimates/4')


def test_create_task_body(monkeypatch):
    row = {'id': 11, 'estimateId': 4, 'dueDate': '2025-03-01T09:30:00.000Z', 'completed': False}
    client, calls = make_client(monkeypatch, [DummyResponse(201, row)])
    task = client.create_task(Task(estimate_id=4, due_date='2025-03-01T09:30:00.000Z'))
    assert calls[0][2] == {'estimateId': 4, 'dueDate': '2025-03-01T09:30:00.000Z', 'completed': False}
    assert task.id == 11
    assert task.completed is False


def test_complete_task_puts_update(monkeypatch):
    client, calls = make_client(monkeypatch, [DummyResponse(200, {'id': 11, 'completed': True})])
    client.complete_task(11)
    assert calls[0][:3] == ('PUT', 'http://backend.test/tasks/11/update', {'completed': True})


def test_complete_task_error_body_is_kept(monkeypatch):
    client, _ = make_client(monkeypatch, [DummyResponse(404, {'error': 'Task not found'})])
    with pytest.raises(ApiError) as exc:
        client.complete_task(11)
    assert exc.value.status_code == 404
    assert exc.value.payload == {'error': 'Task not found'}


def test_non_2xx_is_failure(monkeypatch):
    client, _ = make_client(monkeypatch, [DummyResponse(500, {}), DummyResponse(302, {})])
    with pytest.raises(ApiError):
        client.list_tasks()
    with pytest.raises(ApiError):
        client.list_tasks()


def test_network_error_becomes_api_error(monkeypatch):
    client, _ = make_client(monkeypatch, [requests.ConnectionError('refused')])
    with pytest.raises(ApiError):
        client.list_estimates()


def test_unknown_status_from_backend_is_api_error(monkeypatch):
    row = dict(ESTIMATE_ROW, status='Archived')
    client, _ = make_client(monkeypatch, [DummyResponse(200, [row])])
    with pytest.raises(ApiError):
        client.list_estimates()
