"""Tests for the in-memory tenant store and template catalog."""

import pytest

from switchyard.tenants.models import (
    ScenarioSummary,
    SharedTemplate,
    enabled_template_refs,
    tenant_id_of,
)
from switchyard.tenants.stores.inmemory import InMemoryTemplateCatalog, InMemoryTenantStore
from switchyard.wiring.exceptions import PathConflictError, TenantNotFoundError
from tests.factories.tenants import TEMPLATE_ID, TENANT_ID, bare_tenant, wired_tenant


class TestInMemoryTenantStore:
    """Tests for InMemoryTenantStore."""

    async def test_save_and_get(self) -> None:
        """Saved records are returned by id."""
        store = InMemoryTenantStore()
        assert await store.save(wired_tenant()) == TENANT_ID

        record = await store.get(TENANT_ID)
        assert record is not None
        assert record["companyName"] == "Cool Breeze HVAC"

    async def test_get_missing_returns_none(self) -> None:
        """Unknown tenants return None."""
        assert await InMemoryTenantStore().get("nope") is None

    async def test_returned_records_are_copies(self) -> None:
        """Mutating a returned record does not change the stored one."""
        store = InMemoryTenantStore()
        await store.save(wired_tenant())

        record = await store.get(TENANT_ID)
        assert record is not None
        record["aiAgentSettings"]["aiName"] = "Changed"

        again = await store.get(TENANT_ID)
        assert again is not None
        assert again["aiAgentSettings"]["aiName"] == "Ava"

    async def test_save_requires_id(self) -> None:
        """Records without an id are rejected."""
        with pytest.raises(ValueError):
            await InMemoryTenantStore().save({"companyName": "No Id"})

    async def test_set_fields_if_absent_writes_missing_only(self) -> None:
        """Existing values, including falsy ones, are never overwritten."""
        store = InMemoryTenantStore()
        await store.save(bare_tenant())
        await store.set_fields_if_absent(TENANT_ID, {"aiAgentSettings.aiName": ""})

        written = await store.set_fields_if_absent(
            TENANT_ID,
            {
                "aiAgentSettings.aiName": "AI Assistant",
                "aiAgentSettings.frontDeskBehavior.bookingEnabled": True,
            },
        )

        assert written == ["aiAgentSettings.frontDeskBehavior.bookingEnabled"]
        record = await store.get(TENANT_ID)
        assert record is not None
        assert record["aiAgentSettings"]["aiName"] == ""
        assert record["aiAgentSettings"]["frontDeskBehavior"]["bookingEnabled"] is True

    async def test_set_fields_if_absent_is_idempotent(self) -> None:
        """A second identical call writes nothing."""
        store = InMemoryTenantStore()
        await store.save(bare_tenant())
        values = {"aiAgentSettings.aiName": "AI Assistant"}

        assert await store.set_fields_if_absent(TENANT_ID, values) == ["aiAgentSettings.aiName"]
        assert await store.set_fields_if_absent(TENANT_ID, values) == []

    async def test_set_fields_if_absent_keeps_non_object_parents(self) -> None:
        """A path below a stored list or string is skipped, not forced through."""
        store = InMemoryTenantStore()
        record = bare_tenant()
        record["aiAgentSettings"] = ["legacy"]
        await store.save(record)

        written = await store.set_fields_if_absent(
            TENANT_ID, {"aiAgentSettings.aiName": "AI Assistant"}
        )

        assert written == []
        stored = await store.get(TENANT_ID)
        assert stored is not None
        assert stored["aiAgentSettings"] == ["legacy"]

    async def test_set_fields_if_absent_unknown_tenant(self) -> None:
        """Seeding an unknown tenant raises TenantNotFoundError."""
        with pytest.raises(TenantNotFoundError):
            await InMemoryTenantStore().set_fields_if_absent("nope", {"a.b": 1})

    async def test_set_fields_replaces_values(self) -> None:
        """Stored values are overwritten and missing parents created."""
        store = InMemoryTenantStore()
        await store.save(wired_tenant())

        await store.set_fields(
            TENANT_ID,
            {"aiAgentSettings.aiName": "Max", "aiAgentSettings.voice.speed": 1.1},
        )

        stored = await store.get(TENANT_ID)
        assert stored is not None
        assert stored["aiAgentSettings"]["aiName"] == "Max"
        assert stored["aiAgentSettings"]["voice"] == {"speed": 1.1}

    async def test_set_fields_conflict_writes_nothing(self) -> None:
        """One blocked path aborts the whole write."""
        store = InMemoryTenantStore()
        await store.save(wired_tenant(aiAgentSettings__placeholders="legacy"))

        with pytest.raises(PathConflictError) as exc_info:
            await store.set_fields(
                TENANT_ID,
                {
                    "aiAgentSettings.aiName": "Max",
                    "aiAgentSettings.placeholders.phone": "555-0199",
                },
            )

        assert exc_info.value.ancestor == "aiAgentSettings.placeholders"
        stored = await store.get(TENANT_ID)
        assert stored is not None
        assert stored["aiAgentSettings"]["aiName"] == "Ava"

    async def test_set_fields_unknown_tenant(self) -> None:
        with pytest.raises(TenantNotFoundError):
            await InMemoryTenantStore().set_fields("nope", {"a.b": 1})


class TestInMemoryTemplateCatalog:
    """Tests for InMemoryTemplateCatalog."""

    async def test_get_template(self, template_catalog: InMemoryTemplateCatalog) -> None:
        """Templates are found by id."""
        template = await template_catalog.get_template(TEMPLATE_ID)
        assert template is not None
        assert template.category_key == "hvac"

    async def test_scenario_pool_skips_unknown_and_disabled(
        self, template_catalog: InMemoryTemplateCatalog
    ) -> None:
        """Only existing, enabled templates contribute scenarios."""
        template_catalog.add(
            SharedTemplate(
                id="tpl-retired",
                enabled=False,
                scenarios=[ScenarioSummary(id="scn-old")],
            )
        )

        pool = await template_catalog.get_scenario_pool([TEMPLATE_ID, "tpl-retired", "missing"])

        assert pool.template_ids == [TEMPLATE_ID]
        assert [s.id for s in pool.scenarios] == [
            "scn-ac-not-cooling",
            "scn-book-tuneup",
            "scn-gas-smell",
        ]
        assert pool.effective_config_version is not None


class TestRecordHelpers:
    """Tests for tenant record helpers."""

    def test_tenant_id_prefers_underscore_id(self) -> None:
        """_id wins over id."""
        assert tenant_id_of({"_id": "a", "id": "b"}) == "a"
        assert tenant_id_of({"id": 7}) == "7"
        assert tenant_id_of({}) is None

    def test_enabled_refs_skip_explicitly_disabled(self) -> None:
        """Refs without an enabled flag count as enabled."""
        record = {
            "aiAgentSettings": {
                "templateReferences": [
                    {"templateId": "a"},
                    {"templateId": "b", "enabled": False},
                    {"templateId": "c", "enabled": True},
                    "not-a-ref",
                ]
            }
        }
        assert [r["templateId"] for r in enabled_template_refs(record)] == ["a", "c"]

    def test_enabled_refs_tolerate_bad_shapes(self) -> None:
        """A non-list templateReferences yields no refs."""
        assert enabled_template_refs({"aiAgentSettings": {"templateReferences": "x"}}) == []

    def test_enabled_refs_tolerate_non_object_settings(self) -> None:
        """Legacy list or string agent settings yield no refs."""
        assert enabled_template_refs({"aiAgentSettings": ["legacy"]}) == []
        assert enabled_template_refs({"aiAgentSettings": "v1"}) == []
