import requests


RESEND_API_BASE = "https://api.resend.com"


#============================================
class ResendError(RuntimeError):
	"""
	Raised when the Resend API rejects a request.
	"""


#============================================
class ResendClient:
	"""
	Thin requests wrapper for the Resend broadcast endpoints.
	"""

	def __init__(self, api_key: str, session=None, base_url: str = RESEND_API_BASE, timeout: int = 30):
		if not api_key:
			raise ResendError("Resend API key is required.")
		self.api_key = api_key
		self.base_url = base_url.rstrip("/")
		self.timeout = timeout
		self.session = session if session is not None else requests.Session()

	#============================================
	def _post(self, path: str, payload: dict | None = None) -> dict:
		"""
		POST one JSON request and return the decoded body.
		"""
		url = f"{self.base_url}{path}"
		headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
		}
		try:
			response = self.session.post(url, json=payload or {}, headers=headers, timeout=self.timeout)
		except requests.RequestException as error:
			raise ResendError(f"POST {path} failed: {error}") from error
		if response.status_code >= 300:
			raise ResendError(f"POST {path} returned {response.status_code}: {response.text.strip()}")
		try:
			body = response.json()
		except ValueError:
			return {}
		if not isinstance(body, dict):
			return {}
		return body

	#============================================
	def create_broadcast(self, audience_id: str, from_address: str, subject: str, html: str) -> str:
		"""
		Create a broadcast draft and return its id.
		"""
		body = self._post(
			"/broadcasts",
			{
				"audience_id": audience_id,
				"from": from_address,
				"subject": subject,
				"html": html,
			},
		)
		broadcast_id = str(body.get("id", "")).strip()
		if not broadcast_id:
			raise ResendError("Broadcast create response did not include an id.")
		return broadcast_id

	#============================================
	def send_broadcast(self, broadcast_id: str) -> dict:
		"""
		Send a previously created broadcast.
		"""
		return self._post(f"/broadcasts/{broadcast_id}/send")
