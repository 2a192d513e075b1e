import base64
import logging
import threading
import unittest
from unittest.mock import Mock, patch

import requests

from ecosort.ai.errors import ConfigurationError, UpstreamError
from ecosort.ai.roboflow_client import RoboflowInferenceClient


def _response(status: int, payload=None, json_error: bool = False) -> Mock:
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.text = "" if payload is None else str(payload)
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    return response


class RoboflowInferenceClientTests(unittest.TestCase):
    def _client(self, session: Mock, **overrides) -> RoboflowInferenceClient:
        params = {
            "model": "waste-detect",
            "version": "4",
            "api_key": "secret-key",
            "session": session,
        }
        params.update(overrides)
        return RoboflowInferenceClient(**params)

    def test_posts_base64_form_body_and_returns_json(self) -> None:
        payload = {"predictions": [{"class": "plastic", "confidence": 0.8}]}
        session = Mock()
        session.post.return_value = _response(200, payload)
        client = self._client(session, timeout=12.5)

        result = client.infer(b"binary-image")

        self.assertIs(result, payload)
        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        self.assertEqual(args[0], "https://detect.roboflow.com/waste-detect/4")
        self.assertEqual(kwargs["params"], {"api_key": "secret-key"})
        self.assertEqual(kwargs["data"], base64.b64encode(b"binary-image").decode("ascii"))
        self.assertEqual(
            kwargs["headers"], {"Content-Type": "application/x-www-form-urlencoded"}
        )
        self.assertEqual(kwargs["timeout"], 12.5)

    def test_custom_base_url_is_trimmed(self) -> None:
        client = self._client(Mock(), base_url="http://localhost:9001/")
        self.assertEqual(client.endpoint, "http://localhost:9001/waste-detect/4")

    def test_missing_credentials_fail_without_network_call(self) -> None:
        session = Mock()
        for field in ("model", "version", "api_key"):
            for empty in (None, "", "   "):
                with self.subTest(field=field, value=empty):
                    client = self._client(session, **{field: empty})
                    with self.assertRaises(ConfigurationError) as ctx:
                        client.infer(b"image")
                    self.assertEqual(ctx.exception.missing, (field,))
                    self.assertEqual(ctx.exception.status_code, 500)
                    self.assertEqual(
                        ctx.exception.body(), {"error": "Server configuration error"}
                    )
        session.post.assert_not_called()

    def test_structured_upstream_error_is_passed_through(self) -> None:
        session = Mock()
        session.post.return_value = _response(403, {"error": "Forbidden: invalid api_key"})
        client = self._client(session)

        with self.assertRaises(UpstreamError) as ctx:
            client.infer(b"image")

        self.assertEqual(ctx.exception.status, 403)
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(ctx.exception.body(), {"error": "Forbidden: invalid api_key"})

    def test_unstructured_upstream_error_maps_to_500(self) -> None:
        session = Mock()
        session.post.return_value = _response(502, json_error=True)
        client = self._client(session)

        with self.assertRaises(UpstreamError) as ctx:
            client.infer(b"image")

        self.assertEqual(ctx.exception.status, 502)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(
            ctx.exception.body(),
            {"error": "An error occurred while classifying the image."},
        )

    def test_network_failures_raise_upstream_error(self) -> None:
        session = Mock()
        session.post.side_effect = requests.ConnectionError("connection refused")
        client = self._client(session)

        with self.assertRaises(UpstreamError) as ctx:
            client.infer(b"image")

        self.assertIsNone(ctx.exception.status)
        self.assertEqual(ctx.exception.status_code, 500)

    def test_timeouts_raise_gateway_timeout(self) -> None:
        session = Mock()
        session.post.side_effect = requests.Timeout("read timed out")
        client = self._client(session)

        with self.assertRaises(UpstreamError) as ctx:
            client.infer(b"image")

        self.assertEqual(ctx.exception.status_code, 504)

    def test_invalid_json_success_body_raises_upstream_error(self) -> None:
        session = Mock()
        session.post.return_value = _response(200, json_error=True)
        client = self._client(session)

        with self.assertRaises(UpstreamError):
            client.infer(b"image")

    def test_api_key_never_reaches_the_logs(self) -> None:
        session = Mock()
        session.post.side_effect = [
            _response(200, {"predicted_classes": ["paper"]}),
            _response(403, {"error": "Forbidden"}),
        ]
        client = self._client(session)

        with self.assertLogs("ecosort.ai.roboflow_client", level=logging.DEBUG) as logs:
            client.infer(b"image")
            with self.assertRaises(UpstreamError):
                client.infer(b"image")

        self.assertTrue(logs.output)
        for line in logs.output:
            self.assertNotIn("secret-key", line)

    def test_worker_threads_get_their_own_session(self) -> None:
        created: list[Mock] = []

        def make_session() -> Mock:
            session = Mock()
            session.post.return_value = _response(200, {"predicted_classes": ["glass"]})
            created.append(session)
            return session

        client = RoboflowInferenceClient(model="waste-detect", version="4", api_key="k")
        with patch("ecosort.ai.roboflow_client.requests.Session", side_effect=make_session):
            client.infer(b"image")
            client.infer(b"image")
            worker = threading.Thread(target=client.infer, args=(b"image",))
            worker.start()
            worker.join()

        self.assertEqual(len(created), 2)
        self.assertEqual(created[0].post.call_count, 2)
        self.assertEqual(created[1].post.call_count, 1)


if __name__ == "__main__":
    unittest.main()
