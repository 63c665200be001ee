import httpx

from utils import LIGHT_HOST, LIGHT_PORT, LIGHT_PATH, REQUEST_TIMEOUT


class LightEndpointError(Exception):
    """Raised when the light could not be updated."""


def build_payload(power, brightness, temperature):
    return {
        "numberOfLights": 1,
        "lights": [
            {
                "on": 1 if power else 0,
                "brightness": int(brightness),
                "temperature": int(temperature),
            }
        ],
    }


class LightEndpoint:
    """HTTP client for a single Key Light style device."""

    def __init__(self, host=LIGHT_HOST, port=LIGHT_PORT, path=LIGHT_PATH,
                 timeout=REQUEST_TIMEOUT, transport=None):
        self.host = host
        self.port = port
        self.path = path
        self._client = httpx.Client(
            base_url=f"http://{host}:{port}",
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    @property
    def url(self):
        return f"http://{self.host}:{self.port}{self.path}"

    def update(self, power, brightness, temperature):
        """Send one state update. The response body is not read."""
        payload = build_payload(power, brightness, temperature)
        if self._client.is_closed:
            raise LightEndpointError(f"Connection to {self.url} is already closed")
        try:
            resp = self._client.put(self.path, json=payload)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise LightEndpointError(
                f"{self.url} answered {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise LightEndpointError(f"Could not reach {self.url}: {e}") from e
        except RuntimeError as e:
            # httpx raises this when the client is closed mid-call
            raise LightEndpointError(f"Could not send to {self.url}: {e}") from e

    def close(self):
        self._client.close()
