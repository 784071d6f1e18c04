"""HTTP tests for the automation routes (ASGI client, in-memory container)."""

from app.domain.enums import WorkflowExecutionStatus

TAG_ACTION = {"id": "tag", "type": "add_tag", "config": {"tags": ["vip"]}}
BASE = "/api/v1/automations"


async def test_tenant_header_is_required(client) -> None:
    missing = await client.get(f"{BASE}/metrics")
    invalid = await client.get(f"{BASE}/metrics", headers={"X-Tenant-ID": "bad tenant!"})

    assert missing.status_code == 400
    assert missing.json()["message"] == "Missing required header: X-Tenant-ID"
    assert invalid.status_code == 400


async def test_validate_trigger(client, tenant_headers) -> None:
    response = await client.post(
        f"{BASE}/triggers/validate",
        json={
            "type": "order_created",
            "conditions": [{"field": "total", "operator": "near"}],
        },
        headers=tenant_headers,
    )
    assert response.status_code == 200
    assert response.json() == {
        "is_valid": False,
        "errors": [
            "Condition 1: invalid operator near",
            "Condition 1: value is required",
        ],
        "warnings": [],
    }


async def test_validate_action(client, tenant_headers) -> None:
    ok = await client.post(f"{BASE}/actions/validate", json=TAG_ACTION, headers=tenant_headers)
    bad = await client.post(
        f"{BASE}/actions/validate",
        json={"id": "s", "type": "send_sms", "config": {"message": "hi"}},
        headers=tenant_headers,
    )
    assert ok.json()["is_valid"] is True
    assert bad.json()["errors"] == ["SMS action: fromNumber is required"]


async def test_test_run_executes_workflow(
    client, tenant_headers, workflow_store, contact_store, make_workflow, make_contact
) -> None:
    workflow_store.save(make_workflow(actions=[TAG_ACTION]))
    contact_store.save(make_contact(tags=()))

    response = await client.post(
        f"{BASE}/wf-1/test",
        json={"trigger_data": {"total": 80}, "contact_id": "contact-1"},
        headers=tenant_headers,
    )

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["execution"]["status"] == WorkflowExecutionStatus.COMPLETED.value
    assert body["execution"]["event_type"] == "order_created"
    assert body["action_results"][0]["metadata"]["finalTags"] == ["vip"]
    assert response.headers["X-Request-ID"]


async def test_test_run_of_inactive_workflow_reports_error(
    client, tenant_headers, workflow_store, make_workflow
) -> None:
    workflow_store.save(make_workflow(actions=[TAG_ACTION], is_active=False))
    response = await client.post(f"{BASE}/wf-1/test", json={}, headers=tenant_headers)
    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["error"] == "Workflow is not active: wf-1"


async def test_other_tenants_workflow_is_not_found(
    client, tenant_headers, workflow_store, make_workflow
) -> None:
    workflow_store.save(make_workflow(tenant_id="tenant-2", actions=[TAG_ACTION]))

    for method, path in (
        ("POST", f"{BASE}/wf-1/test"),
        ("GET", f"{BASE}/wf-1/analytics"),
        ("GET", f"{BASE}/wf-1/executions"),
        ("GET", f"{BASE}/wf-1/validation"),
    ):
        kwargs = {"json": {}} if method == "POST" else {}
        response = await client.request(method, path, headers=tenant_headers, **kwargs)
        assert response.status_code == 404, path
        assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_validation_endpoint(client, tenant_headers, workflow_store, make_workflow) -> None:
    workflow_store.save(make_workflow())
    response = await client.get(f"{BASE}/wf-1/validation", headers=tenant_headers)
    assert response.json()["errors"] == ["At least one action is required"]


async def test_analytics_executions_and_metrics(
    client, tenant_headers, engine, workflow_store, contact_store, make_workflow, make_contact
) -> None:
    workflow_store.save(make_workflow(actions=[TAG_ACTION]))
    contact_store.save(make_contact())
    await engine.execute_workflow_by_id("wf-1", {}, "contact-1")
    await engine.execute_workflow_by_id("wf-1", {}, "ghost")

    analytics = (await client.get(f"{BASE}/wf-1/analytics", headers=tenant_headers)).json()
    executions = await client.get(
        f"{BASE}/wf-1/executions", params={"limit": 1}, headers=tenant_headers
    )
    metrics = (await client.get(f"{BASE}/metrics", headers=tenant_headers)).json()

    assert analytics["total_executions"] == 2
    assert analytics["success_rate"] == 50.0
    assert [e["status"] for e in executions.json()] == ["failed"]
    assert metrics["total_workflows"] == 1
    assert metrics["total_executions"] == 2
    assert len(metrics["recent_executions"]) == 2


async def test_executions_limit_is_bounded(client, tenant_headers, workflow_store, make_workflow) -> None:
    workflow_store.save(make_workflow())
    response = await client.get(
        f"{BASE}/wf-1/executions", params={"limit": 0}, headers=tenant_headers
    )
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_cancel_finished_execution(
    client, tenant_headers, engine, workflow_store, make_workflow
) -> None:
    workflow_store.save(make_workflow())
    execution = await engine.execute_workflow_by_id("wf-1")

    response = await client.post(
        f"{BASE}/executions/{execution.id}/cancel", headers=tenant_headers
    )
    assert response.status_code == 200
    assert response.json() == {"cancelled": False}


async def test_test_run_cannot_touch_another_tenants_contact(
    client, tenant_headers, workflow_store, contact_store, make_workflow, make_contact
) -> None:
    workflow_store.save(make_workflow(actions=[TAG_ACTION]))
    contact_store.save(make_contact("victim", tenant_id="tenant-2", tags=()))

    response = await client.post(
        f"{BASE}/wf-1/test",
        json={"trigger_data": {}, "contact_id": "victim"},
        headers=tenant_headers,
    )

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is False
    assert "Contact not found: victim" in body["error"]
    assert (await contact_store.get_contact("victim")).tags == ()
