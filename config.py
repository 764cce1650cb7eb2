from dataclasses import dataclass, field
from pathlib import Path
import os
from dotenv import load_dotenv

@dataclass
class Config:
    base_url: str = "https://api.torn.com/v2/"
    request_timeout: float = 30
    # Torn log type for "Attack mug" events in user/log
    mug_log_type: int = 8160

    settings_dir: Path = Path("settings")
    settings_path_yaml: Path = field(init=False)

    outputs_dir: Path = Path("outputs")
    reports_dir: Path = field(init=False)

    attack_count: int = 100
    mug_count: int = 100

    api_key: str = field(init=False)


    def __post_init__(self):
        load_dotenv()
        self.settings_dir.mkdir(exist_ok=True)
        self.settings_path_yaml = self.settings_dir / "reward_settings.yaml"

        self.outputs_dir.mkdir(exist_ok=True)
        self.reports_dir = self.outputs_dir / "reports"
        self.reports_dir.mkdir(exist_ok=True)

        self.api_key = os.environ.get("TORN_API_KEY", "")

    def require_api_key(self, api_key: str = "") -> str:
        key = api_key or self.api_key
        if not key:
            raise RuntimeError("No TORN_API_KEY found")
        return key
