"""Integration tests for API routes"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from api.main import app
from api.state import AppState, set_app_state


@pytest.mark.integration
@pytest.mark.api
class TestAPIRoutes:
    """Test API routes against a throwaway database and export folder"""
    
    @pytest.fixture
    def client(self, tmp_path):
        """Create test client with fresh application state"""
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
            poolclass=NullPool,
        )
        state = AppState(db_engine=engine, export_path=str(tmp_path / "exports"))
        set_app_state(state)
        with TestClient(app) as test_client:
            yield test_client
        set_app_state(None)
    
    def _fill_oil_change(self, client):
        client.patch("/api/document", json={
            "customer_name": "Jane Doe",
            "customer_phone": "555-123-4567",
            "customer_email": "jane@example.com",
        })
        client.patch("/api/document/items/1", json={"field": "description", "value": "Oil Change"})
        return client.patch("/api/document/items/1", json={"field": "unit_price", "value": "50.00"})
    
    def test_root_endpoint(self, client):
        """Test root endpoint"""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert data["status"] == "running"
    
    def test_health_endpoint(self, client):
        """Test health check endpoint"""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
    
    def test_document_totals(self, client):
        response = self._fill_oil_change(client)
        
        assert response.status_code == 200
        assert response.json()["totals"] == {"subtotal": "50.00", "tax": "4.00", "total": "54.00"}
    
    def test_out_of_range_quantity_ignored(self, client):
        response = client.patch("/api/document/items/1", json={"field": "quantity", "value": "1500"})
        
        assert response.status_code == 200
        assert response.json()["updated"] is False
    
    def test_unknown_line_item(self, client):
        response = client.patch("/api/document/items/99", json={"field": "quantity", "value": "2"})
        assert response.status_code == 404
    
    def test_add_part_line(self, client):
        response = client.post("/api/document/items", json={"part_number": "PH3614"})
        
        assert response.status_code == 201
        assert response.json()["item"]["description"] == "PH3614 - Oil Filter (Fram)"
    
    def test_attachment_upload(self, client):
        files = {"file": ("leak.jpg", b"\xff\xd8\xff" + b"0" * 64, "image/jpeg")}
        response = client.post("/api/document/attachments", files=files)
        
        assert response.status_code == 201
        attachment_id = response.json()["attachment"]["id"]
        assert client.delete(f"/api/document/attachments/{attachment_id}").status_code == 200
        
        files = {"file": ("notes.txt", b"hello", "text/plain")}
        assert client.post("/api/document/attachments", files=files).status_code == 400
    
    def test_contacts(self, client):
        response = client.get("/api/contacts", params={"search": "john"})
        assert response.json()["count"] == 1
        
        response = client.post("/api/contacts", json={
            "name": "Jane Doe", "phone": "555-123-4567", "email": "not-an-email",
        })
        assert response.status_code == 400
        assert response.json()["field"] == "email"
        assert client.get("/api/contacts").json()["count"] == 2
    
    def test_parts_search_and_price_update(self, client):
        assert client.get("/api/parts", params={"query": "filter"}).json()["count"] == 2
        assert client.get("/api/parts/stale").json()["count"] == 20
        
        response = client.put("/api/parts/50/50/price", json={"price": "13.49"})
        assert response.status_code == 200
        assert response.json()["part"]["stale"] is False
        assert client.get("/api/parts/stale").json()["count"] == 19
        
        assert client.put("/api/parts/H11/price", json={"price": "-3"}).status_code == 400
    
    def test_lookup_url(self, client):
        response = client.get("/api/parts/lookup-url", params={"site": "RockAuto", "term": "brake pads"})
        assert response.status_code == 200
        assert response.json()["url"] == "https://www.rockauto.com/en/catalog/brake%20pads"
        
        response = client.get("/api/parts/lookup-url", params={"site": "Junkyard", "term": "x"})
        assert response.status_code == 400
    
    def test_export_csv(self, client):
        self._fill_oil_change(client)
        response = client.get("/api/export/csv")
        
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="INV-001_QB2014.csv"' in response.headers["content-disposition"]
        assert response.text.split("\n")[0].startswith('"Invoice#","Customer"')
    
    def test_export_file_name_outside_latin1(self, client):
        client.patch("/api/document", json={"number": "INV-€1"})
        response = client.get("/api/export/text")
        
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="INV-_1.txt"' in disposition
        assert "filename*=UTF-8''INV-%E2%82%AC1.txt" in disposition
    
    def test_export_to_device(self, client):
        self._fill_oil_change(client)
        response = client.post("/api/export/device")
        
        assert response.status_code == 200
        assert len(response.json()["files"]) == 4
    
    def test_send_rejects_missing_phone(self, client):
        client.patch("/api/document", json={"customer_name": "Jane Doe"})
        response = client.post("/api/send", json={"channel": "message"})
        
        assert response.status_code == 400
        assert client.get("/api/history").json()["count"] == 0
        assert client.get("/api/history/logs").json()["count"] == 0
    
    def test_send_message_and_load_from_history(self, client):
        self._fill_oil_change(client)
        response = client.post("/api/send", json={"channel": "message", "save_to_device": False})
        
        assert response.status_code == 200
        data = response.json()
        assert data["uri"].startswith("sms:555-123-4567?body=")
        assert data["save"]["next_number"] == "INV-002"
        assert client.get("/api/document").json()["document"]["number"] == "INV-002"
        
        saved_id = client.get("/api/history").json()["documents"][0]["id"]
        client.post("/api/document/reset")
        response = client.post(f"/api/document/load/{saved_id}")
        assert response.status_code == 200
        assert response.json()["document"]["customer"]["name"] == "Jane Doe"
        assert response.json()["document"]["number"] == "INV-002"
    
    def test_quote_numbering_survives_restart(self, client, tmp_path):
        self._fill_oil_change(client)
        client.patch("/api/document", json={"kind": "quote"})
        client.patch("/api/document", json={"number": "QUO-009"})
        response = client.post("/api/send", json={"channel": "message", "save_to_device": False})
        assert response.json()["save"]["next_number"] == "QUO-010"
        
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
            poolclass=NullPool,
        )
        set_app_state(AppState(db_engine=engine, export_path=str(tmp_path / "exports")))
        with TestClient(app) as restarted:
            document = restarted.get("/api/document").json()["document"]
            text = restarted.get("/api/export/text").text
        
        assert document["kind"] == "quote"
        assert document["number"] == "QUO-010"
        assert text.startswith("QUOTE QUO-010\n")
    
    def test_clipboard_failure_keeps_dialog_open(self, client):
        self._fill_oil_change(client)
        client.patch("/api/presentation", json={"show_send_dialog": True})
        response = client.post("/api/send", json={"channel": "clipboard", "save_to_device": False})
        
        assert response.status_code == 200
        assert response.json()["close_dialog"] is False
        assert client.get("/api/presentation").json()["show_send_dialog"] is True
        assert client.get("/api/history/logs").json()["count"] == 1
    
    def test_unknown_history_entry(self, client):
        assert client.post("/api/document/load/missing").status_code == 404
        assert client.get("/api/history/missing").status_code == 404
    
    def test_tutorial_dismissal(self, client):
        assert client.get("/api/presentation").json()["show_tutorial"] is True
        response = client.post("/api/presentation/tutorial/dismiss")
        assert response.json()["show_tutorial"] is False
