import json
import re

import pytest

from datbolt.errors import WriteError
from datbolt.etl.loaders.batch_writer import build_insert_statement, insert_batch
from datbolt.etl.results import Err, Ok


def test_statement_shape_for_n_rows_m_columns():
    columns = ["id", "location", "severity"]
    rows = [{"id": str(i), "location": "Island 8", "severity": "low"} for i in range(4)]

    sql, params = build_insert_statement("incidents", rows, columns)

    groups = re.findall(r"\(([^()]*)\)", sql.split("VALUES", 1)[1])
    assert len(groups) == 4
    assert all(g.split(", ") == ["%s"] * 3 for g in groups)
    assert len(params) == 12
    assert sql.startswith('INSERT INTO "incidents" ("id", "location", "severity") VALUES')
    assert sql.endswith("ON CONFLICT DO NOTHING")


def test_params_follow_column_order_and_missing_is_none():
    sql, params = build_insert_statement(
        "AuditReports",
        [{"state": "Healthy", "Id": "a"}, {"Id": "b"}],
        ["Id", "state"],
    )
    assert params == ["a", "Healthy", "b", None]
    assert '"AuditReports"' in sql


def test_structured_values_are_serialized_scalars_untouched():
    _, params = build_insert_statement(
        "reports",
        [{"id": "r", "report_data": {"a": [1, 2]}, "total_incidents": 0, "tags": ["x"]}],
        ["id", "report_data", "total_incidents", "tags"],
    )
    assert params[0] == "r"
    assert json.loads(params[1]) == {"a": [1, 2]}
    assert params[2] == 0
    assert params[3] == '["x"]'


def test_build_rejects_empty_rows():
    with pytest.raises(ValueError):
        build_insert_statement("incidents", [], ["id"])


def test_empty_batch_is_a_noop(target):
    result = insert_batch(target, "incidents", [], ["id"])
    assert result == Ok(0)
    assert target.statements == []


def test_insert_batch_skips_conflicts(target):
    rows = [{"id": "1"}, {"id": "2"}]
    assert insert_batch(target, "incidents", rows, ["id"]) == Ok(2)
    assert insert_batch(target, "incidents", rows + [{"id": "3"}], ["id"]) == Ok(1)
    assert len(target.rows["incidents"]) == 3


def test_driver_error_becomes_write_error(target):
    target.fail("incidents")

    result = insert_batch(target, "incidents", [{"id": "1"}], ["id"])

    assert isinstance(result, Err)
    assert isinstance(result.error, WriteError)
    assert result.error.table == "incidents"
    assert "incident_severity" in result.message
