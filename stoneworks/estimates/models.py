from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from stoneworks.pricing import DEFAULT_LABOR_COST, DEFAULT_TAX_RATE


class UnknownStatusError(ValueError):
    pass


class EstimateStatus(str, Enum):
    PENDING = 'Pending'
    SENT = 'Sent'
    APPROVED = 'Approved'
    DECLINED = 'Declined'

    @classmethod
    def parse(cls, value) -> 'EstimateStatus':
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownStatusError(f'unknown estimate status: {value!r}') from None


def _num(value) -> float:
    return float(value) if value is not None else 0.0


@dataclass
class Estimate:
    material: str
    length: float
    width: float
    thickness: float
    edge_finish: str
    material_cost: float
    edge_finish_cost: float
    cost: float
    labor_cost: float = DEFAULT_LABOR_COST
    tax_rate: float = DEFAULT_TAX_RATE
    discount: float = 0.0
    status: EstimateStatus = EstimateStatus.PENDING
    id: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        """Request body for POST/PUT: every field except ``id``."""
        return {
            'material'      : self.material,
            'length'        : self.length,
            'width'         : self.width,
            'thickness'     : self.thickness,
            'edgeFinish'    : self.edge_finish,
            'materialCost'  : self.material_cost,
            'edgeFinishCost': self.edge_finish_cost,
            'laborCost'     : self.labor_cost,
            'taxRate'       : self.tax_rate,
            'discount'      : self.discount,
            'cost'          : self.cost,
            'status'        : self.status.value,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_payload()
        data['id'] = self.id
        return data

    def without_id(self) -> 'Estimate':
        return replace(self, id=None)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Estimate':
        raw_id = data.get('id')
        return cls(
            id               = int(raw_id) if raw_id is not None else None,
            material         = data.get('material') or '',
            length           = _num(data.get('length')),
            width            = _num(data.get('width')),
            thickness        = _num(data.get('thickness')),
            edge_finish      = data.get('edgeFinish') or '',
            material_cost    = _num(data.get('materialCost')),
            edge_finish_cost = _num(data.get('edgeFinishCost')),
            labor_cost       = _num(data.get('laborCost', DEFAULT_LABOR_COST)),
            tax_rate         = _num(data.get('taxRate', DEFAULT_TAX_RATE)),
            discount         = _num(data.get('discount')),
            cost             = _num(data.get('cost')),
            status           = EstimateStatus.parse(data.get('status') or EstimateStatus.PENDING.value),
        )


@dataclass
class Task:
    estimate_id: int
    due_date: str
    completed: bool = False
    id: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            'estimateId': self.estimate_id,
            'dueDate'   : self.due_date,
            'completed' : self.completed,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_payload()
        data['id'] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Task':
        raw_id = data.get('id')
        return cls(
            id          = int(raw_id) if raw_id is not None else None,
            estimate_id = int(data['estimateId']),
            due_date    = data.get('dueDate') or '',
            completed   = bool(data.get('completed', False)),
        )
