# stoneworks/estimates/forms.py

"""Form state shared by the create form and the edit view.

One ``EstimateForm`` value carries the editable fields plus the mode it was
opened in. ``target_id`` is set only while editing an existing estimate, so
there is no separate "currently edited" flag to keep in sync.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from stoneworks.estimates.models import Estimate, EstimateStatus
from stoneworks.pricing import (
    DEFAULT_LABOR_COST,
    DEFAULT_TAX_RATE,
    PricingInput,
    compute_for,
)

# form key -> attribute
NUMERIC_FIELDS = {
    'length'        : 'length',
    'width'         : 'width',
    'thickness'     : 'thickness',
    'materialCost'  : 'material_cost',
    'edgeFinishCost': 'edge_finish_cost',
    'laborCost'     : 'labor_cost',
    'taxRate'       : 'tax_rate',
    'discount'      : 'discount',
}


class FormMode(str, Enum):
    CREATE = 'create'
    EDIT = 'edit'


def parse_number(raw) -> Optional[float]:
    """Coerce a submitted value the way a number input does.

    Blank means 0; anything unparsable, NaN or infinite comes back as
    ``None``.
    """
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
    else:
        text = str(raw).strip()
        if not text:
            return 0.0
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


def _text(raw) -> str:
    return str(raw).strip() if raw is not None else ''


@dataclass(frozen=True)
class EstimateForm:
    material: str = ''
    length: Optional[float] = 0.0
    width: Optional[float] = 0.0
    thickness: Optional[float] = 0.0
    edge_finish: str = ''
    material_cost: Optional[float] = 0.0
    edge_finish_cost: Optional[float] = 0.0
    labor_cost: Optional[float] = DEFAULT_LABOR_COST
    tax_rate: Optional[float] = DEFAULT_TAX_RATE
    discount: Optional[float] = 0.0
    status: EstimateStatus = EstimateStatus.PENDING
    target_id: Optional[int] = None

    @property
    def mode(self) -> FormMode:
        return FormMode.CREATE if self.target_id is None else FormMode.EDIT

    @property
    def pricing_input(self) -> Optional[PricingInput]:
        values = {attr: getattr(self, attr) for attr in NUMERIC_FIELDS.values()}
        if any(v is None for v in values.values()):
            return None
        return PricingInput(**values)

    @property
    def price(self) -> Optional[float]:
        params = self.pricing_input
        if params is None:
            return None
        total = compute_for(params)
        # huge finite inputs can still overflow
        if total is None or not math.isfinite(total):
            return None
        return total

    def to_estimate(self) -> Optional[Estimate]:
        """Snapshot the form as an estimate priced right now, or ``None``."""
        cost = self.price
        if cost is None:
            return None
        return Estimate(
            id=self.target_id,
            material=self.material,
            length=self.length,
            width=self.width,
            thickness=self.thickness,
            edge_finish=self.edge_finish,
            material_cost=self.material_cost,
            edge_finish_cost=self.edge_finish_cost,
            labor_cost=self.labor_cost,
            tax_rate=self.tax_rate,
            discount=self.discount,
            cost=cost,
            status=self.status,
        )

    @classmethod
    def from_estimate(cls, estimate: Estimate) -> 'EstimateForm':
        return cls(
            material=estimate.material,
            length=estimate.length,
            width=estimate.width,
            thickness=estimate.thickness,
            edge_finish=estimate.edge_finish,
            material_cost=estimate.material_cost,
            edge_finish_cost=estimate.edge_finish_cost,
            labor_cost=estimate.labor_cost,
            tax_rate=estimate.tax_rate,
            discount=estimate.discount,
            status=estimate.status,
            target_id=estimate.id,
        )

    @classmethod
    def from_mapping(cls, data: Mapping, target_id: Optional[int] = None) -> 'EstimateForm':
        """Build form state from submitted data (request.form or JSON).

        Missing numeric keys fall back to the form defaults; an unknown
        ``status`` raises ``UnknownStatusError``.
        """
        defaults = cls()
        numbers = {}
        for key, attr in NUMERIC_FIELDS.items():
            if key in data:
                numbers[attr] = parse_number(data.get(key))
            else:
                numbers[attr] = getattr(defaults, attr)
        return cls(
            material=_text(data.get('material')),
            edge_finish=_text(data.get('edgeFinish')),
            status=EstimateStatus.parse(data.get('status') or EstimateStatus.PENDING.value),
            target_id=target_id,
            **numbers,
        )
