# Copyright Thales 2025
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Integration tests for the logs controller **using the in-memory log store**
(no OpenSearch).
"""

from fastapi import status
from fastapi.testclient import TestClient

from log_ingestor.features.logs.service import LogService
from log_ingestor.features.logs.structures import SearchError


class TestLogsController:
    # ─────────────────────────────── ingest ───────────────────────────────
    def test_ingest_success(self, client_fixture: TestClient, log_store, sample_records):
        resp = client_fixture.post("/ingest", json=sample_records)
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"message": "Log ingested successfully"}
        assert log_store.count() == len(sample_records)

    def test_ingest_accepts_partial_entries(self, client_fixture: TestClient, log_store):
        resp = client_fixture.post("/ingest", json=[{"level": "WARN", "message": "no trace here"}])
        assert resp.status_code == status.HTTP_200_OK
        hit = log_store.search({"query": {"bool": {"must": []}}})["hits"]["hits"][0]["_source"]
        assert hit["traceId"] == ""
        assert hit["timestamp"] is None
        assert hit["metadata"] == {}

    def test_ingest_accepts_null_fields(self, client_fixture: TestClient, log_store):
        record = {"level": "INFO", "message": "m", "traceId": None, "spanId": None, "commit": None, "metadata": None}
        resp = client_fixture.post("/ingest", json=[record])
        assert resp.status_code == status.HTTP_200_OK
        assert log_store.count() == 1
        hit = log_store.search({"query": {"bool": {"must": []}}})["hits"]["hits"][0]["_source"]
        assert (hit["traceId"], hit["spanId"], hit["commit"], hit["metadata"]) == ("", "", "", {})

    def test_ingest_null_metadata_value_is_empty_string(self, client_fixture: TestClient, log_store):
        resp = client_fixture.post("/ingest", json=[{"level": "INFO", "metadata": {"region": None}}])
        assert resp.status_code == status.HTTP_200_OK
        hit = log_store.search({"query": {"bool": {"must": []}}})["hits"]["hits"][0]["_source"]
        assert hit["metadata"] == {"region": ""}

    def test_ingest_malformed_json_is_400(self, client_fixture: TestClient, log_store):
        resp = client_fixture.post("/ingest", content=b"[{not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert log_store.count() == 0

    def test_ingest_non_array_is_400(self, client_fixture: TestClient, log_store, sample_records):
        resp = client_fixture.post("/ingest", json=sample_records[0])
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert log_store.count() == 0

    def test_ingest_malformed_record_is_400_and_writes_nothing(self, client_fixture: TestClient, log_store, sample_records):
        bad = dict(sample_records[1], timestamp="not-a-date")
        resp = client_fixture.post("/ingest", json=[sample_records[0], bad, sample_records[2]])
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert log_store.count() == 0

    def test_ingest_engine_failure_is_500_and_keeps_prior_writes(self, client_fixture: TestClient, log_store, monkeypatch, sample_records):
        original = log_store.index_record
        calls = []

        def flaky(document_id, document):
            calls.append(document_id)
            if len(calls) == 2:
                raise ConnectionError("engine unreachable")
            original(document_id, document)

        monkeypatch.setattr(log_store, "index_record", flaky)
        resp = client_fixture.post("/ingest", json=sample_records)

        assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert resp.json()["detail"] == f"Failed to index document with ID={calls[1]}"
        assert log_store.count() == 1
        assert len(calls) == 2

    # ─────────────────────────────── search ───────────────────────────────
    def test_search_without_filters_returns_everything(self, client_fixture: TestClient, sample_records):
        client_fixture.post("/ingest", json=sample_records)
        resp = client_fixture.get("/search")
        assert resp.status_code == status.HTTP_200_OK
        hits = resp.json()["hits"]["hits"]
        assert len(hits) == len(sample_records)
        assert set(hits[0]) == {"_source"}

    def test_search_filters_are_conjunctive(self, client_fixture: TestClient, sample_records):
        client_fixture.post("/ingest", json=sample_records)
        resp = client_fixture.get("/search", params={"level": "ERROR", "traceId": "ghi-rst-789"})
        assert resp.status_code == status.HTTP_200_OK
        hits = resp.json()["hits"]["hits"]
        assert len(hits) == 1
        source = hits[0]["_source"]
        assert source["message"] == "Connection refused by upstream"
        assert source["resourceId"] == "server-1234"
        assert source["metadata"] == {"region": "eu-west-1"}

    def test_search_by_commit_uses_commit_field(self, client_fixture: TestClient, sample_records):
        client_fixture.post("/ingest", json=sample_records)
        resp = client_fixture.get("/search", params={"commit": "5e5342f"})
        assert resp.status_code == status.HTTP_200_OK
        assert [h["_source"]["commit"] for h in resp.json()["hits"]["hits"]] == ["5e5342f", "5e5342f"]

    def test_search_date_range(self, client_fixture: TestClient, sample_records):
        client_fixture.post("/ingest", json=sample_records)
        resp = client_fixture.get("/search", params={"startDate": "2023-09-16T00:00:00Z", "endDate": "2023-09-30T00:00:00Z"})
        assert [h["_source"]["message"] for h in resp.json()["hits"]["hits"]] == ["Service started", "Connection refused by upstream"]

    def test_search_single_date_bound_is_ignored(self, client_fixture: TestClient, sample_records):
        client_fixture.post("/ingest", json=sample_records)
        resp = client_fixture.get("/search", params={"startDate": "2030-01-01T00:00:00Z"})
        assert len(resp.json()["hits"]["hits"]) == len(sample_records)

    def test_search_failure_is_500(self, client_fixture: TestClient, monkeypatch):
        def boom(self, params):
            raise SearchError()

        monkeypatch.setattr(LogService, "search", boom)
        resp = client_fixture.get("/search", params={"level": "ERROR"})
        assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert resp.json()["detail"] == "Error executing search query"

    def test_search_engine_error_is_500(self, client_fixture: TestClient, log_store, monkeypatch):
        monkeypatch.setattr(log_store, "search", lambda query: (_ for _ in ()).throw(ConnectionError("down")))
        resp = client_fixture.get("/search")
        assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR

    # ─────────────────────────────── health ───────────────────────────────
    def test_healthz(self, client_fixture: TestClient):
        resp = client_fixture.get("/healthz")
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"status": "ok"}

    def test_ready(self, client_fixture: TestClient):
        resp = client_fixture.get("/ready")
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"status": "ready"}

    def test_not_ready_when_engine_does_not_answer(self, client_fixture: TestClient, log_store, monkeypatch):
        monkeypatch.setattr(log_store, "ping", lambda: False)
        resp = client_fixture.get("/ready")
        assert resp.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
