import unittest

import httpx
from fastapi.testclient import TestClient

from bssc_assistant.ai.ai_client import GeminiAIClient
from bssc_assistant.config import Settings
from bssc_assistant.main import app
from bssc_assistant.orchestrator import RequestOrchestrator
from bssc_assistant.routes.analyze import get_orchestrator
from bssc_assistant.services.explorer_fetcher import ExplorerFetcher


class TestAnalyzeEndpoint(unittest.TestCase):
    def setUp(self):
        self.requests = []
        self.gemini_status = 200
        self.gemini_body = {"candidates": [{"content": {"parts": [{"text": "Looks fine."}]}}]}
        self.api_key = "test-key"

        app.dependency_overrides[get_orchestrator] = self._orchestrator
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "explorer.test":
            return httpx.Response(
                200,
                text="<html><head><title>Address</title></head><body>SOL 1.5</body></html>",
            )
        if isinstance(self.gemini_body, dict):
            return httpx.Response(self.gemini_status, json=self.gemini_body)
        return httpx.Response(self.gemini_status, text=self.gemini_body)

    def _orchestrator(self) -> RequestOrchestrator:
        settings = Settings(
            gemini_api_key=self.api_key,
            explorer_base_url="https://explorer.test",
            gemini_model_url="https://gemini.test/generate",
        )
        transport = httpx.MockTransport(self._handler)
        return RequestOrchestrator(
            settings,
            explorer=ExplorerFetcher(settings, transport=transport),
            ai_client=GeminiAIClient(settings, transport=transport),
        )

    def test_short_query_returns_answer(self):
        resp = self.client.post("/api/analyze", json={"query": "hi"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"answer": "Looks fine."})
        self.assertEqual([r.url.host for r in self.requests], ["gemini.test"])

    def test_long_query_hits_explorer_then_gemini(self):
        address = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"

        resp = self.client.post("/api/analyze", json={"query": address})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            [str(r.url).split("?")[0] for r in self.requests],
            [f"https://explorer.test/address/{address}", "https://gemini.test/generate"],
        )

    def test_missing_query_is_400(self):
        for body in ({}, {"query": ""}, {"query": None}):
            with self.subTest(body=body):
                resp = self.client.post("/api/analyze", json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json(), {"error": "Query is required"})

        self.assertEqual(self.requests, [])

    def test_missing_or_invalid_body_is_400(self):
        resp = self.client.post("/api/analyze")
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post(
            "/api/analyze",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_missing_credential_is_500(self):
        """Sans clé Gemini : erreur de configuration, aucun appel sortant."""
        self.api_key = None

        resp = self.client.post("/api/analyze", json={"query": "x" * 60})

        self.assertEqual(resp.status_code, 500)
        self.assertIn("GEMINI_API_KEY", resp.json()["error"])
        self.assertEqual(self.requests, [])

    def test_gemini_error_is_502(self):
        self.gemini_status = 429
        self.gemini_body = "quota exceeded"

        resp = self.client.post("/api/analyze", json={"query": "hi"})

        self.assertEqual(resp.status_code, 502)
        self.assertIn("429", resp.json()["error"])
        self.assertEqual(len(self.requests), 1)

    def test_missing_candidates_is_still_200(self):
        self.gemini_body = {"usageMetadata": {}}

        resp = self.client.post("/api/analyze", json={"query": "hi"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"answer": "No legible response from AI."})

    def test_unexpected_error_is_500(self):
        self.gemini_body = "<html>not json</html>"

        resp = self.client.post("/api/analyze", json={"query": "hi"})

        self.assertEqual(resp.status_code, 500)
        self.assertTrue(resp.json()["error"].startswith("Internal Server Error:"))

    def test_get_is_not_allowed(self):
        resp = self.client.get("/api/analyze")

        self.assertEqual(resp.status_code, 405)


class TestUnhandledErrors(unittest.TestCase):
    def tearDown(self):
        app.dependency_overrides.clear()

    def test_error_outside_route_is_500_json(self):
        """Une erreur hors du try de la route passe par le handler global."""

        def broken_orchestrator():
            raise RuntimeError("settings unavailable")

        app.dependency_overrides[get_orchestrator] = broken_orchestrator
        client = TestClient(app, raise_server_exceptions=False)

        resp = client.post("/api/analyze", json={"query": "hi"})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(),
            {"error": "Internal Server Error: settings unavailable"},
        )


class TestHealth(unittest.TestCase):
    def test_health(self):
        resp = TestClient(app).get("/health")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")


if __name__ == "__main__":
    unittest.main()
