"""Tests for AutomationManager: test runs, validation, analytics and metrics."""

import pytest

from app.domain.enums import WorkflowExecutionStatus
from app.domain.exceptions import ResourceNotFoundException

TENANT = "tenant-1"
TAG_ACTION = {"id": "tag", "type": "add_tag", "config": {"tags": ["vip"]}}


@pytest.fixture
def stored(workflow_store, contact_store, make_workflow, make_contact):
    workflow_store.save(make_workflow("wf-1", actions=[TAG_ACTION], name="Good"))
    workflow_store.save(make_workflow("wf-2", actions=[TAG_ACTION], name="Flaky"))
    workflow_store.save(make_workflow("wf-off", actions=[TAG_ACTION], is_active=False))
    workflow_store.save(make_workflow("wf-foreign", tenant_id="tenant-2", actions=[TAG_ACTION]))
    contact_store.save(make_contact())


async def test_get_workflow_hides_other_tenants(manager, stored) -> None:
    assert (await manager.get_workflow("wf-1", TENANT)).name == "Good"
    with pytest.raises(ResourceNotFoundException):
        await manager.get_workflow("wf-foreign", TENANT)
    with pytest.raises(ResourceNotFoundException):
        await manager.get_workflow("missing")


async def test_test_workflow_runs_actions(manager, contact_store, stored) -> None:
    result = await manager.test_workflow("wf-1", {"total": 5}, "contact-1", tenant_id=TENANT)

    assert result.success is True
    assert result.error is None
    assert result.execution.status == WorkflowExecutionStatus.COMPLETED
    assert [r.action_id for r in result.action_results] == ["tag"]
    assert "vip" in (await contact_store.get_contact("contact-1")).tags


async def test_test_workflow_reports_failures(manager, stored) -> None:
    failed = await manager.test_workflow("wf-1", {}, "ghost", tenant_id=TENANT)
    assert failed.success is False
    assert failed.execution.status == WorkflowExecutionStatus.FAILED
    assert failed.error == "1 action(s) failed: Contact not found: ghost"


async def test_test_workflow_never_raises(manager, stored) -> None:
    inactive = await manager.test_workflow("wf-off", tenant_id=TENANT)
    missing = await manager.test_workflow("missing")

    assert inactive.success is False
    assert inactive.execution is None
    assert inactive.error == "Workflow is not active: wf-off"
    assert missing.error == "Workflow not found: missing"


async def test_validate_workflow_by_id_or_entity(manager, make_workflow, stored) -> None:
    assert (await manager.validate_workflow("wf-1", TENANT)).is_valid is True
    draft = make_workflow("draft", name="")
    result = await manager.validate_workflow(draft)
    assert result.errors == ["Workflow name is required", "At least one action is required"]


async def test_analytics(manager, stored) -> None:
    await manager.test_workflow("wf-1", {}, "contact-1")
    await manager.test_workflow("wf-1", {}, "ghost")

    analytics = await manager.get_workflow_analytics("wf-1", TENANT)

    assert analytics.workflow_name == "Good"
    assert analytics.stats.total_executions == 2
    assert analytics.success_rate == 50.0
    assert await manager.get_workflow_analytics("missing") is None
    assert await manager.get_workflow_analytics("wf-foreign", TENANT) is None


async def test_cancel_execution_checks_tenant(manager, engine, stored) -> None:
    result = await manager.test_workflow("wf-1", {}, "contact-1")
    execution_id = result.execution.id

    assert manager.cancel_execution(execution_id, tenant_id="tenant-2") is False
    assert manager.cancel_execution(execution_id, tenant_id=TENANT) is False
    assert manager.cancel_execution("unknown") is False


async def test_metrics_aggregate_tenant_workflows(manager, stored) -> None:
    for _ in range(3):
        await manager.test_workflow("wf-1", {}, "contact-1")
    await manager.test_workflow("wf-2", {}, "contact-1")
    await manager.test_workflow("wf-2", {}, "ghost")
    await manager.test_workflow("wf-foreign", {}, "contact-1")

    metrics = await manager.get_automation_metrics(TENANT)

    assert metrics.total_workflows == 3
    assert metrics.active_workflows == 2
    assert metrics.total_executions == 5
    assert metrics.success_rate == pytest.approx(80.0)
    assert [p.workflow_id for p in metrics.top_performing_workflows] == ["wf-1", "wf-2"]
    assert metrics.top_performing_workflows[0].success_rate == 100.0
    assert metrics.top_performing_workflows[1].executions == 2
    assert len(metrics.recent_executions) == 5
    assert all(e.tenant_id == TENANT for e in metrics.recent_executions)
    stamps = [e.completed_at or e.started_at for e in metrics.recent_executions]
    assert stamps == sorted(stamps, reverse=True)


async def test_metrics_for_empty_tenant(manager) -> None:
    metrics = await manager.get_automation_metrics("nobody")
    assert metrics.total_workflows == 0
    assert metrics.success_rate == 0.0
    assert metrics.average_execution_time_ms == 0.0
    assert metrics.top_performing_workflows == []
    assert metrics.recent_executions == []
