from __future__ import annotations

import main as cli
from infra.services import build_service_graph


def _wire(monkeypatch, session, receipt_store):
    graph = build_service_graph(session, receipt_store=receipt_store, analysis_client=None)
    monkeypatch.setattr(cli, "build_services", lambda: graph)
    monkeypatch.setattr(cli, "setup_logging", lambda: None)
    return graph


def test_summary_prints_project_finances(monkeypatch, capsys, session, receipt_store):
    graph = _wire(monkeypatch, session, receipt_store)
    try:
        project = graph.project_service.create_project("u1", "Harbour Tower", budget=1000.0)
        perms = graph.permission_resolver.resolve(project.id, "u1")
        graph.budget_service.add_allocation(perms, project.id, "Labor", 500.0)
        graph.expense_service.create_expense(perms, project.id, "Labor", 475.0)

        assert cli.main(["summary", project.id, "--user", "u1"]) == 0
    finally:
        graph.finance_service.close()

    out = capsys.readouterr().out
    assert "Harbour Tower (CAD)" in out
    assert "$1,000" in out
    assert "95.0%" in out
    assert "immediate attention required" in out


def test_summary_for_non_member_exits_with_error(monkeypatch, capsys, session, receipt_store):
    graph = _wire(monkeypatch, session, receipt_store)
    try:
        project = graph.project_service.create_project("u1", "Harbour Tower")
        assert cli.main(["summary", project.id, "--user", "intruder"]) == 2
    finally:
        graph.finance_service.close()

    assert "Permission denied" in capsys.readouterr().err


def test_export_expenses_writes_csv(monkeypatch, capsys, session, receipt_store, tmp_path):
    graph = _wire(monkeypatch, session, receipt_store)
    try:
        project = graph.project_service.create_project("u1", "Harbour Tower")
        perms = graph.permission_resolver.resolve(project.id, "u1")
        graph.expense_service.create_expense(perms, project.id, "Labor", 12.0)

        assert cli.main(["export-expenses", project.id, "--out", str(tmp_path), "--user", "u1"]) == 0
    finally:
        graph.finance_service.close()

    written = capsys.readouterr().out.strip()
    assert written.startswith(str(tmp_path))
    assert written.endswith(".csv")


def test_exports_check_the_callers_role(monkeypatch, capsys, session, receipt_store, tmp_path):
    graph = _wire(monkeypatch, session, receipt_store)
    try:
        project = graph.project_service.create_project("u1", "Harbour Tower", budget=1000.0)
        perms = graph.permission_resolver.resolve(project.id, "u1")
        graph.expense_service.create_expense(perms, project.id, "Labor", 12.0)

        out_csv = tmp_path / "leak.csv"
        out_xlsx = tmp_path / "leak.xlsx"
        assert cli.main(["export-expenses", project.id, "--out", str(out_csv), "--user", "intruder"]) == 2
        assert cli.main(["export-finance", project.id, "--out", str(out_xlsx), "--user", "intruder"]) == 2
    finally:
        graph.finance_service.close()

    assert "Permission denied" in capsys.readouterr().err
    assert not out_csv.exists()
    assert not out_xlsx.exists()
