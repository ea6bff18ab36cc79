import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .const import API_BASE_URL, DEFAULT_RETRY_BACKOFF_FACTOR, DEFAULT_RETRY_TOTAL
from .exceptions import AuthenticationFailed, RemoteUnavailable, UnmappedRemoteValue
from .states import ArmState

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

RETRY_STATUS_FORCELIST = [500, 502, 503, 504]
REQUEST_TIMEOUT = 10

LOGIN_PATH = "api/v1/auth/login"
PANELS_PATH = "api/v1/panels"
STATUS_PATH = "api/v1/status"

ARM_TYPES = {
    "FULL_ARM": ArmState.FULL_ARM,
    "NIGHT_ARM": ArmState.NIGHT_ARM,
    "DISARMED": ArmState.DISARMED,
}

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# G4S SMART Alarm client
# ---------------------------------------------------------------------------

class G4SClient:
    """Blocking client for the G4S SMART Alarm cloud service.

    Every method performs network I/O and must run in an executor.
    """

    def __init__(
        self,
        username: str,
        password: str,
        base_url: str = API_BASE_URL,
        retry_total: int = DEFAULT_RETRY_TOTAL,
        retry_backoff_factor: float = DEFAULT_RETRY_BACKOFF_FACTOR,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.password = password
        self.retry_total = retry_total
        self.retry_backoff_factor = retry_backoff_factor
        self.session: requests.Session = self._create_session()
        self._token: Optional[str] = None

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        retry = Retry(
            total=self.retry_total,
            backoff_factor=self.retry_backoff_factor,
            status_forcelist=RETRY_STATUS_FORCELIST,
            allowed_methods=["GET", "POST"],
        )
        adapter = HTTPAdapter(max_retries=retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    # --------------------------------------------------------------------- #
    # Session handling
    # --------------------------------------------------------------------- #

    def login(self) -> None:
        url = f"{self.base_url}/{LOGIN_PATH}"
        try:
            resp = self.session.post(
                url,
                json={"username": self.username, "password": self.password},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise RemoteUnavailable(f"Login request failed: {exc}") from exc

        if resp.status_code in (401, 403):
            raise AuthenticationFailed("G4S rejected the username or password")
        payload = self._decode(resp)
        token = payload.get("accessToken") if isinstance(payload, dict) else None
        if not token:
            raise RemoteUnavailable("Login response did not contain an access token")
        self._token = token
        logger.debug("Logged in to G4S as %s", self.username)

    def logout(self) -> None:
        self._token = None
        self.session.close()
        self.session = self._create_session()

    def _request(self, method: str, path: str, *, reauth: bool = True) -> Any:
        if not self.authenticated:
            self.login()

        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise RemoteUnavailable(f"{method} {path} failed: {exc}") from exc

        if resp.status_code == 401 and reauth:
            logger.info("G4S session expired, logging in again")
            self._token = None
            return self._request(method, path, reauth=False)
        if resp.status_code in (401, 403):
            raise AuthenticationFailed(f"{method} {path} was not authorized")
        return self._decode(resp)

    @staticmethod
    def _decode(resp: requests.Response) -> Any:
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise RemoteUnavailable(str(exc)) from exc
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise RemoteUnavailable("G4S returned a malformed response") from exc

    # --------------------------------------------------------------------- #
    # Reads
    # --------------------------------------------------------------------- #

    def get_panel_id(self) -> str:
        """Return the identifier of the account's alarm panel."""
        panels = self._request("GET", PANELS_PATH)
        if not panels:
            raise RemoteUnavailable("No alarm panel is registered on this account")
        if len(panels) > 1:
            logger.warning("Account has %d panels, using the first one", len(panels))
        try:
            return str(panels[0]["panelId"])
        except (KeyError, TypeError) as exc:
            raise RemoteUnavailable("Panel list did not contain a panel id") from exc

    def _get_status(self) -> Dict[str, Any]:
        status = self._request("GET", STATUS_PATH)
        if not isinstance(status, dict):
            raise RemoteUnavailable("Status response was not an object")
        return status

    def get_arm_state(self) -> ArmState:
        raw = self._get_status().get("armType")
        try:
            return ARM_TYPES[raw]
        except KeyError:
            raise UnmappedRemoteValue(f"Unsupported arm type from G4S: {raw!r}") from None

    def is_alarm_triggered(self) -> bool:
        return bool(self._get_status().get("alarmTriggered"))

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def _command(self, panel_id: str, action: str) -> None:
        logger.debug("Sending %s to panel %s", action, panel_id)
        self._request("POST", f"{PANELS_PATH}/{panel_id}/{action}")

    def arm_panel(self, panel_id: str) -> None:
        self._command(panel_id, "arm")

    def night_arm_panel(self, panel_id: str) -> None:
        self._command(panel_id, "nightarm")

    def disarm_panel(self, panel_id: str) -> None:
        self._command(panel_id, "disarm")
