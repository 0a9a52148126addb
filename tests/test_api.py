"""Testes de integração da API (TestClient + SQLite em memória)"""

import pytest
from fastapi.testclient import TestClient

from simuladores.api.dependencies import get_audit_service, get_config_source
from simuladores.api.main import app
from simuladores.audit import AuditEventType, AuditService
from simuladores.core import RuleSetKey, get_default
from simuladores.database import AuditLogDB, SqlAlchemyConfigSource, get_db


@pytest.fixture
def audit(session_factory):
    return AuditService(session_factory=session_factory)


@pytest.fixture
def client(session_factory, audit):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_config_source] = lambda: SqlAlchemyConfigSource(session_factory)
    app.dependency_overrides[get_audit_service] = lambda: audit
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_ferias(client, limite, workspace=None, is_active=True):
    headers = {"X-Workspace-Id": workspace} if workspace else {}
    return client.post(
        "/api/v1/rulesets",
        json={
            "key": "FERIAS",
            "name": f"Férias limite {limite}",
            "payload": {"tercoConstitucional": True, "limiteDiasAbono": limite},
            "is_active": is_active
        },
        headers=headers
    )


class TestRootEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestRuleSetEndpoints:

    def test_create_and_list(self, client, audit):
        response = create_ferias(client, 5, workspace="ws-1")

        assert response.status_code == 201
        data = response.json()
        assert data["version"] == 1
        assert data["is_active"] is True
        assert data["workspace_id"] == "ws-1"
        assert data["created_by"] == "system"

        listed = client.get("/api/v1/rulesets", params={"key": "ferias"}, headers={"X-Workspace-Id": "ws-1"})
        assert [rs["id"] for rs in listed.json()] == [data["id"]]
        assert audit.entries[-1].event_type == AuditEventType.RULESET_CREATED

    def test_create_writes_audit_log_row(self, client, session_factory):
        created = create_ferias(client, 5, workspace="ws-1", is_active=False).json()

        db = session_factory()
        try:
            row = db.query(AuditLogDB).filter(AuditLogDB.action == "RULESET_CREATED").one()
            assert row.entity_type == "ruleset"
            assert row.entity_id == str(created["id"])
            assert row.workspace_id == "ws-1"
            assert row.extra_metadata["version"] == 1
        finally:
            db.close()

    def test_invalid_payload_returns_all_violations(self, client, audit):
        payload = get_default(RuleSetKey.HONORARIOS)
        payload["descontoSistemaFinanceiro"] = 1.5
        payload["baseMin"] = -1

        response = client.post(
            "/api/v1/rulesets",
            json={"key": "HONORARIOS", "name": "Inválido", "payload": payload},
            headers={"X-User-Id": "ana"}
        )

        assert response.status_code == 422
        fields = {error["field"] for error in response.json()["detail"]["errors"]}
        assert fields == {"descontoSistemaFinanceiro", "baseMin"}
        assert audit.entries[-1].event_type == AuditEventType.RULESET_REJECTED
        assert audit.entries[-1].user_id == "ana"
        assert client.get("/api/v1/rulesets").json() == []

    def test_unknown_key(self, client):
        response = client.post("/api/v1/rulesets", json={"key": "INSS", "name": "x", "payload": {}})
        assert response.status_code == 400

    def test_activate(self, client):
        first = create_ferias(client, 10).json()
        second = create_ferias(client, 5).json()
        assert second["version"] == 2

        response = client.post(f"/api/v1/rulesets/{first['id']}/activate", headers={"X-User-Id": "ana"})

        assert response.status_code == 200
        assert response.json()["is_active"] is True
        assert client.get(f"/api/v1/rulesets/{second['id']}").json()["is_active"] is False

    def test_activate_not_found(self, client):
        assert client.post("/api/v1/rulesets/999/activate").status_code == 404

    def test_get_not_found(self, client):
        assert client.get("/api/v1/rulesets/999").status_code == 404

    def test_active_falls_back_to_default(self, client):
        response = client.get("/api/v1/rulesets/active", params={"key": "RESCISAO"})

        data = response.json()
        assert data["is_fallback"] is True
        assert data["ruleset"] is None
        assert data["config"] == get_default(RuleSetKey.RESCISAO)

    def test_active_returns_stored_ruleset(self, client):
        created = create_ferias(client, 5, workspace="ws-1").json()

        data = client.get(
            "/api/v1/rulesets/active", params={"key": "FERIAS"}, headers={"X-Workspace-Id": "ws-1"}
        ).json()

        assert data["is_fallback"] is False
        assert data["config"]["limiteDiasAbono"] == 5
        assert data["ruleset"]["id"] == created["id"]

    def test_validate(self, client):
        ok = client.post("/api/v1/rulesets/validate", json={"key": "FATOR_R", "payload": get_default("FATOR_R")})
        bad = client.post("/api/v1/rulesets/validate", json={"key": "FATOR_R", "payload": [1, 2]})

        assert ok.json() == {"ok": True, "errors": []}
        assert bad.json()["errors"][0]["type"] == "dict_type"

    def test_defaults_and_schema(self, client):
        default = client.get("/api/v1/rulesets/defaults/simples_das").json()
        schema = client.get("/api/v1/rulesets/schema/FERIAS").json()

        assert default["key"] == "SIMPLES_DAS"
        assert len(default["payload"]["tables"]["I"]) == 6
        assert "limiteDiasAbono" in schema["properties"]


class TestSimulateEndpoints:

    def test_ferias_with_fallback(self, client, audit):
        response = client.post("/api/v1/simulate/ferias", json={"salario_base": 3000, "dias_abono": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == "4500.00"
        assert data["is_fallback"] is True
        assert [item["label"] for item in data["breakdown"]] == [
            "Férias (30 dias)", "1/3 Constitucional", "Abono pecuniário"
        ]
        assert audit.entries[-1].event_type == AuditEventType.RULESET_FALLBACK

    def test_ferias_uses_workspace_ruleset(self, client):
        create_ferias(client, 5, workspace="ws-1")

        own = client.post(
            "/api/v1/simulate/ferias",
            json={"salario_base": "3.000,00", "dias_abono": 10},
            headers={"X-Workspace-Id": "ws-1"}
        ).json()
        other = client.post(
            "/api/v1/simulate/ferias",
            json={"salario_base": 3000, "dias_abono": 10},
            headers={"X-Workspace-Id": "ws-2"}
        ).json()

        assert own["is_fallback"] is False
        assert own["total"] == "4500.00"
        assert len(own["warnings"]) == 1
        assert other["is_fallback"] is True
        assert other["total"] == "5000.00"

    def test_rescisao(self, client):
        response = client.post("/api/v1/simulate/rescisao", json={
            "salario_base": 3000,
            "tipo_rescisao": "SEM_JUSTA_CAUSA",
            "anos_servico": 2,
            "dias_trabalhados_mes": 15,
            "meses_decimo_terceiro": 6,
            "dias_ferias_vencidas": 30,
            "saldo_fgts": 10000
        })

        assert response.json()["total"] == "14600.00"

    def test_honorarios(self, client):
        response = client.post("/api/v1/simulate/honorarios", json={
            "faturamento": 50000,
            "num_funcionarios": 3,
            "sistema_financeiro": True
        })

        data = response.json()
        assert data["total"] == "684.00"
        assert data["details"]["total_anual"] == "8208.00"

    def test_fator_r(self, client):
        data = client.post("/api/v1/simulate/fator-r", json={"folha_12m": 28000, "receita_12m": 100000}).json()

        assert data["annex"] == "III"
        assert data["branch"] == "ge"
        assert data["is_fallback"] is True

    def test_simples_das(self, client):
        data = client.post("/api/v1/simulate/simples-das", json={
            "annex": "I", "receita_12m": 200000, "receita_mes": 20000
        }).json()

        assert data["total"] == "8660.00"
        assert data["details"]["effective_rate"] == "0.0433"
        assert data["details"]["das_mensal"] == "866.00"

    def test_simples_das_bracket_not_found(self, client, audit):
        response = client.post("/api/v1/simulate/simples-das", json={"annex": "I", "receita_12m": 5000000})

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "bracket_not_found"
        assert audit.entries[-1].event_type == AuditEventType.BRACKET_NOT_FOUND

    def test_huge_amounts_do_not_fail(self, client):
        ferias = client.post("/api/v1/simulate/ferias", json={"salario_base": "1e30", "dias_abono": 5})
        simples = client.post("/api/v1/simulate/simples-das", json={"annex": "I", "receita_12m": "1e27"})

        assert ferias.status_code == 200
        assert ferias.json()["breakdown"][0]["amount"] == "1000000000000000.00"
        assert simples.status_code == 422
        assert simples.json()["detail"]["error"] == "bracket_not_found"


class TestAuditEndpoints:

    def test_report_counts_workspace_fallbacks(self, client):
        headers = {"X-Workspace-Id": "ws-1"}
        for _ in range(2):
            client.post("/api/v1/simulate/ferias", json={"salario_base": 3000}, headers=headers)
        client.post("/api/v1/simulate/ferias", json={"salario_base": 3000}, headers={"X-Workspace-Id": "ws-2"})

        report = client.get("/api/v1/audit/report", headers=headers).json()

        assert report["total_events"] == 2
        assert report["fallback_count"] == 2

    def test_entity_trail(self, client):
        created = create_ferias(client, 5, workspace="ws-1", is_active=False).json()
        client.post(f"/api/v1/rulesets/{created['id']}/activate", headers={"X-Workspace-Id": "ws-1"})

        trail = client.get(f"/api/v1/audit/ruleset/{created['id']}", headers={"X-Workspace-Id": "ws-1"}).json()
        other = client.get(f"/api/v1/audit/ruleset/{created['id']}", headers={"X-Workspace-Id": "ws-2"}).json()

        assert [entry["event_type"] for entry in trail] == ["RULESET_CREATED", "RULESET_ACTIVATED"]
        assert other == []

    def test_empty_report(self, client):
        report = client.get("/api/v1/audit/report").json()

        assert report == {"workspace_id": None, "message": "Nenhum evento de auditoria"}
