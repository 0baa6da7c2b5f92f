import json
from decimal import Decimal

import pytest

from force_planner.config import TEMPLATE_PATH
from force_planner.ledger import AllocationLedger
from force_planner.template_loader import TemplateError, load_template, validate_template


def _write(tmp_path, payload, name='template.json'):
    target = tmp_path / name
    target.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding='utf-8')
    return target


def test_packaged_template_builds_a_ledger_under_default_limit():
    template = load_template(TEMPLATE_PATH)
    assert list(template)[:2] == ['army', 'navy']

    ledger = AllocationLedger.from_template(template)
    assert ledger.budget_limit == Decimal('143e9')
    assert ledger.allocated_total == Decimal('121.5e9')
    assert not ledger.is_over_limit
    assert ledger.group_count == 0
    assert all(not group.is_custom for group in ledger.groups)


def test_packaged_template_items_are_internally_consistent():
    ledger = AllocationLedger.from_template(load_template())
    for group in ledger.groups:
        for item in group.items:
            assert item.budget == item.quantity * item.unit_cost
            assert item.min <= item.budget <= item.max


def test_load_template_accepts_list_and_keyed_items(tmp_path):
    path = _write(tmp_path, {
        'reserve': {'name': 'Reserve', 'items': [{'name': 'Battalions', 'budget': 10, 'unitCost': 5}]},
        'guard': {'name': 'Guard', 'items': {'Brigades': {'budget': 20, 'unitCost': 4}}},
    })
    ledger = AllocationLedger.from_template(load_template(path), budget_limit=100)
    assert ledger.item('reserve', 0).name == 'Battalions'
    assert ledger.item('guard', 'Brigades').budget == Decimal(20)
    assert ledger.allocated_total == Decimal(30)


def test_missing_file_raises_template_error(tmp_path):
    with pytest.raises(TemplateError, match='Could not read'):
        load_template(tmp_path / 'missing.json')


def test_invalid_json_raises_template_error(tmp_path):
    with pytest.raises(TemplateError, match='not valid JSON'):
        load_template(_write(tmp_path, '{"army": '))


def test_template_error_is_a_value_error(tmp_path):
    with pytest.raises(ValueError):
        load_template(_write(tmp_path, '[]'))


def test_validate_template_reports_each_problem():
    errors = validate_template({
        'army': {'name': 'Army', 'items': {'Tanks': {'budget': -1, 'unitCost': 'x'}}},
        'navy': {'items': 5},
        'custom_group_1': {'name': 'Sneaky', 'items': []},
        'marines': 'not a group',
    })
    assert 'army.items.Tanks.budget: must not be negative' in errors
    assert 'army.items.Tanks.unitCost: expected a number' in errors
    assert "navy: missing 'name'" in errors
    assert "navy: 'items' must be a list or an object" in errors
    assert any(error.startswith('custom_group_1:') for error in errors)
    assert 'marines: group must be an object' in errors


def test_validate_template_accepts_packaged_file():
    with TEMPLATE_PATH.open('r', encoding='utf-8') as handle:
        assert validate_template(json.load(handle)) == []
