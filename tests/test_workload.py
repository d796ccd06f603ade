"""
Assignment grouping and employee row building.
"""
import datetime as dt

from core.data import prepare_context
from core.filters import DashboardFilters, filter_tasks
from core.models import Dataset
from core.workload import build_employee_rows, group_tasks_by_assignee, utilization_pct
from tests.utils import NOW, make_employee, make_task


class TestGroupTasksByAssignee:
    def test_every_employee_gets_a_bucket(self):
        employees = [make_employee("e1"), make_employee("e2")]
        buckets = group_tasks_by_assignee(employees, [make_task("t1", assignee_id="e1")])
        assert list(buckets) == ["e1", "e2"]
        assert [t.id for t in buckets["e1"]] == ["t1"]
        assert buckets["e2"] == ()

    def test_unassigned_and_dangling_are_dropped(self):
        employees = [make_employee("e1")]
        tasks = [
            make_task("t1", assignee_id=None),
            make_task("t2", assignee_id="ghost"),
            make_task("t3", assignee_id="e1"),
        ]
        buckets = group_tasks_by_assignee(employees, tasks)
        assert [t.id for t in buckets["e1"]] == ["t3"]
        assert set(buckets) == {"e1"}

    def test_task_order_preserved(self):
        tasks = [make_task(f"t{i}", assignee_id="e1") for i in range(5)]
        buckets = group_tasks_by_assignee([make_employee("e1")], tasks)
        assert [t.id for t in buckets["e1"]] == ["t0", "t1", "t2", "t3", "t4"]


class TestUtilization:
    def test_rounds_half_up(self):
        assert utilization_pct(16, 38) == 42
        assert utilization_pct(1, 8) == 13

    def test_zero_capacity(self):
        assert utilization_pct(12, 0) == 0

    def test_over_allocation_allowed(self):
        assert utilization_pct(44, 40) == 110

    def test_monotonic_in_hours(self):
        values = [utilization_pct(h, 37) for h in range(0, 80)]
        assert values == sorted(values)


class TestBuildEmployeeRows:
    def test_sample_rows(self, sample_dataset, now):
        f = DashboardFilters()
        buckets = group_tasks_by_assignee(sample_dataset.employees, filter_tasks(sample_dataset.tasks, f))
        rows = build_employee_rows(sample_dataset.employees, buckets, f, now)

        assert [(r.id, r.risk) for r in rows] == [("e3", 22), ("e1", 18), ("e5", 18), ("e2", 8), ("e4", 0)]
        by_id = {r.id: r for r in rows}
        assert by_id["e2"].assigned_tasks == 2
        assert by_id["e2"].assigned_hours == 16
        assert by_id["e2"].utilization == 42
        assert by_id["e5"].utilization == 40
        assert by_id["e5"].secure_reports == 3
        assert by_id["e4"].assigned_hours == 0
        assert by_id["e3"].risk_band == "low"

    def test_assigned_hours_match_tasks(self, sample_dataset, now):
        f = DashboardFilters()
        buckets = group_tasks_by_assignee(sample_dataset.employees, sample_dataset.tasks)
        for row in build_employee_rows(sample_dataset.employees, buckets, f, now):
            expected = sum(t.effort_hours for t in sample_dataset.tasks if t.assignee_id == row.id)
            assert row.assigned_hours == expected

    def test_stable_ties(self):
        employees = [make_employee(f"e{i}", name=f"Person {i}") for i in range(6)]
        buckets = group_tasks_by_assignee(employees, [])
        rows = build_employee_rows(employees, buckets, DashboardFilters(), NOW)
        assert [r.id for r in rows] == [e.id for e in employees]

    def test_org_filter_applies_to_employee_org(self):
        employees = [make_employee("e1", org_unit="TI"), make_employee("e2", org_unit="RH")]
        # e1's task lives in RH, so the task facet removes it while the employee still matches
        tasks = [make_task("t1", assignee_id="e1", org_unit="RH", hours=30)]
        f = DashboardFilters(org_unit="TI")
        buckets = group_tasks_by_assignee(employees, filter_tasks(tasks, f))
        rows = build_employee_rows(employees, buckets, f, NOW)
        assert [r.id for r in rows] == ["e1"]
        assert rows[0].assigned_hours == 0

    def test_unknown_org_yields_no_rows(self, sample_dataset, now):
        f = DashboardFilters(org_unit="Nowhere")
        buckets = group_tasks_by_assignee(sample_dataset.employees, filter_tasks(sample_dataset.tasks, f))
        assert build_employee_rows(sample_dataset.employees, buckets, f, now) == []

    def test_name_query_case_insensitive(self, sample_dataset, now):
        f = DashboardFilters(name_query="DÍAZ")
        buckets = group_tasks_by_assignee(sample_dataset.employees, sample_dataset.tasks)
        rows = build_employee_rows(sample_dataset.employees, buckets, f, now)
        assert [r.name for r in rows] == ["María Díaz"]

    def test_pattern_facet_narrows_workload(self, sample_dataset, now):
        f = DashboardFilters(pattern="offer")
        buckets = group_tasks_by_assignee(sample_dataset.employees, filter_tasks(sample_dataset.tasks, f))
        rows = build_employee_rows(sample_dataset.employees, buckets, f, now)
        assert [(r.id, r.risk) for r in rows] == [("e5", 12), ("e3", 8), ("e1", 4), ("e2", 0), ("e4", 0)]
        assert all(r.assigned_tasks == 0 for r in rows)

    def test_rows_are_recomputed_against_now(self, sample_dataset):
        f = DashboardFilters()
        buckets = group_tasks_by_assignee(sample_dataset.employees, sample_dataset.tasks)
        later = dt.datetime(2025, 8, 27, 9, 0)
        rows = {r.id: r for r in build_employee_rows(sample_dataset.employees, buckets, f, later)}
        # t2 (2025-08-28) is now within the window as well as the overdue t10
        assert rows["e2"].risk == 16


class TestIdentityMatching:
    def test_ids_compared_as_given(self):
        ds = Dataset.from_dict(
            {
                "employees": [{"id": "e1 ", "name": "Padded", "orgUnit": "TI", "weeklyCapacity": 40}],
                "tasks": [{"id": "t1", "assigneeId": "e1 ", "orgUnit": "TI", "effortHours": 8}],
            }
        )
        rows = prepare_context(DashboardFilters(), ds, NOW)["employee_rows"]
        assert rows[0].id == "e1 "
        assert rows[0].assigned_tasks == 1
        assert rows[0].assigned_hours == 8

    def test_trimmed_id_does_not_match_padded_assignee(self):
        ds = Dataset.from_dict(
            {
                "employees": [{"id": "e1", "name": "Plain", "orgUnit": "TI"}],
                "tasks": [{"id": "t1", "assigneeId": "e1 ", "orgUnit": "TI", "effortHours": 8}],
            }
        )
        rows = prepare_context(DashboardFilters(), ds, NOW)["employee_rows"]
        assert rows[0].assigned_hours == 0

    def test_numeric_ids_match(self):
        ds = Dataset.from_dict(
            {
                "employees": [{"id": 7, "name": "Numeric", "orgUnit": "TI", "weeklyCapacity": 40}],
                "tasks": [{"id": 1, "assigneeId": 7, "orgUnit": "TI", "effortHours": 5}],
            }
        )
        rows = prepare_context(DashboardFilters(), ds, NOW)["employee_rows"]
        assert rows[0].assigned_hours == 5

    def test_empty_assignee_is_unassigned(self):
        ds = Dataset.from_dict({"employees": [{"id": "e1"}], "tasks": [{"id": "t1", "assigneeId": ""}]})
        assert ds.tasks[0].assignee_id is None
