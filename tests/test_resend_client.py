import os
import sys

import pytest
import requests


REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PIPELINE_DIR = os.path.join(REPO_ROOT, "pipeline")
if PIPELINE_DIR not in sys.path:
	sys.path.insert(0, PIPELINE_DIR)

from postlib import resend_client


#============================================
class FakeResponse:
	def __init__(self, status_code: int, payload=None, text: str = ""):
		self.status_code = status_code
		self._payload = payload
		self.text = text

	def json(self):
		if self._payload is None:
			raise ValueError("no json")
		return self._payload


#============================================
class FakeSession:
	"""
	Capture POST calls and return queued responses.
	"""

	def __init__(self, responses: list):
		self.responses = list(responses)
		self.calls = []

	def post(self, url, json=None, headers=None, timeout=None):
		self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
		response = self.responses.pop(0)
		if isinstance(response, Exception):
			raise response
		return response


#============================================
def test_create_and_send_broadcast() -> None:
	"""
	Client should post the broadcast payload with bearer auth, then send it.
	"""
	session = FakeSession([FakeResponse(200, {"id": "bc_1"}), FakeResponse(200, {"id": "bc_1"})])
	client = resend_client.ResendClient("re_key", session=session)
	broadcast_id = client.create_broadcast("aud_1", "Blog <hi@example.test>", "New post: X", "<p>x</p>")
	client.send_broadcast(broadcast_id)

	assert broadcast_id == "bc_1"
	create_call, send_call = session.calls
	assert create_call["url"] == "https://api.resend.com/broadcasts"
	assert create_call["headers"]["Authorization"] == "Bearer re_key"
	assert create_call["json"] == {
		"audience_id": "aud_1",
		"from": "Blog <hi@example.test>",
		"subject": "New post: X",
		"html": "<p>x</p>",
	}
	assert create_call["timeout"] == 30
	assert send_call["url"] == "https://api.resend.com/broadcasts/bc_1/send"


#============================================
def test_error_status_raises() -> None:
	"""
	Non-2xx responses should raise ResendError with the status.
	"""
	session = FakeSession([FakeResponse(422, text="invalid audience")])
	client = resend_client.ResendClient("re_key", session=session)
	with pytest.raises(resend_client.ResendError, match="422"):
		client.create_broadcast("aud", "from", "subject", "html")


#============================================
def test_missing_broadcast_id_raises() -> None:
	"""
	A create response without an id cannot be sent.
	"""
	session = FakeSession([FakeResponse(200, None)])
	client = resend_client.ResendClient("re_key", session=session)
	with pytest.raises(resend_client.ResendError, match="id"):
		client.create_broadcast("aud", "from", "subject", "html")


#============================================
def test_transport_error_wrapped() -> None:
	"""
	requests exceptions should surface as ResendError.
	"""
	session = FakeSession([requests.ConnectionError("offline")])
	client = resend_client.ResendClient("re_key", session=session)
	with pytest.raises(resend_client.ResendError, match="offline"):
		client.send_broadcast("bc_1")


#============================================
def test_empty_api_key_rejected() -> None:
	with pytest.raises(resend_client.ResendError):
		resend_client.ResendClient("")
