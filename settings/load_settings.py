import yaml

from config import Config
from core.models import RewardSettings


def get_reward_settings(config: Config) -> RewardSettings:
    with open(config.settings_path_yaml, "r") as file:
        settings = yaml.safe_load(file) or {}

    # Fall back to TORN_API_KEY when the file leaves the key empty
    api_key = settings.pop("apiKey", None) or settings.get("api_key") or config.api_key
    settings["api_key"] = api_key

    return RewardSettings(**settings)
