# services/session.py
import os
import threading
from ipaddress import IPv4Address, AddressValueError
import hub_driver
from services.hub_state import HubState, PreconditionError
from services.fetch import fetch_hub, FetchResult
from services.apply import apply_routing, RouteOutcome
from services.compare import compare_routing, RouteDiff
from services import presets


class HubSession:
    """
    Everything the front end keeps between requests: where the hub is, the
    last state read from it and the last preset loaded. The two states are
    never merged.
    """

    def __init__(self, host: str, port: int, preset_dir: str):
        self.host = host
        self.port = port
        self.preset_dir = preset_dir
        self.current_hub: HubState | None = None
        self.loaded_preset: HubState | None = None
        self.loaded_preset_name: str | None = None
        self.last_preamble = ""
        # one hub operation at a time; route handlers run in a threadpool
        self._lock = threading.Lock()

    @classmethod
    def from_env(cls) -> "HubSession":
        return cls(hub_driver.HOST, hub_driver.PORT, os.getenv("PRESET_DIR", "presets"))

    @property
    def hub_read(self) -> bool:
        return self.current_hub is not None

    def reset(self):
        with self._lock:
            self.current_hub = None
            self.loaded_preset = None
            self.loaded_preset_name = None
            self.last_preamble = ""

    def set_target(self, host: str, port: int | None = None):
        """Only way the hub address changes after start-up."""
        try:
            IPv4Address(host)
        except AddressValueError as e:
            raise ValueError(f"Invalid IP address format: {host}") from e
        with self._lock:
            self.host = host
            if port is not None:
                self.port = int(port)

    # ---------------- hub ----------------

    def refresh_hub(self, strict: bool = False) -> FetchResult:
        with self._lock:
            res = fetch_hub(self.host, self.port, strict=strict)
            # swap only after a complete fetch
            if self.current_hub is None:
                self.current_hub = HubState()
            self.current_hub.replace_with(res.state)
            self.last_preamble = res.preamble
            return res

    def apply_loaded(self) -> list[RouteOutcome]:
        with self._lock:
            if self.loaded_preset is None:
                raise PreconditionError("no preset loaded")
            return apply_routing(self.host, self.port, self.loaded_preset)

    def compare(self) -> list[RouteDiff]:
        with self._lock:
            return compare_routing(self.loaded_preset, self.current_hub)

    # ---------------- presets ----------------

    def save_current(self, name: str, description: str = "", overwrite: bool = False):
        with self._lock:
            if self.current_hub is None or not self.current_hub.routing:
                raise PreconditionError("no hub data, read the hub first")
            path = presets.preset_path(self.preset_dir, name)
            if path.exists() and not overwrite:
                raise PreconditionError(f"preset '{path.name}' already exists")
            snapshot = HubState()
            snapshot.replace_with(self.current_hub)
            snapshot.description = description
            return presets.save_preset(snapshot, path)

    def load(self, name: str) -> HubState:
        with self._lock:
            path = presets.preset_path(self.preset_dir, name)
            state = presets.load_preset(path)
            if self.loaded_preset is None:
                self.loaded_preset = HubState()
            self.loaded_preset.replace_with(state)
            self.loaded_preset_name = path.stem
            return state

    def list_presets(self) -> list[tuple[str, str]]:
        with self._lock:
            return presets.list_presets(self.preset_dir)

    def delete(self, name: str):
        with self._lock:
            return presets.delete_preset(self.preset_dir, name)


SESSION = HubSession.from_env()
