from __future__ import annotations
import os
import textwrap
from typing import Dict, Optional

import yaml

from .constants import DEFAULT_TIMEZONE, LOOKBACK_DAYS, WEEKEND_DAYS
from .models import AppConfig

# ===== App defaults =====
DEFAULT_CONFIG = {
    "lookback_days": LOOKBACK_DAYS,       # recent-history window per (team, label)
    "pad_labels_to_members": False,       # True: every member gets a slot, extras on blank labels
    "timezone": DEFAULT_TIMEZONE,         # local day for the daily gate
    "weekend_days": list(WEEKEND_DAYS),   # no shuffle on these weekdays (Mon=0)
    "random_seed": None,
    "data_dir": "data",
}

CONFIG_PATH = "assets/config.yaml"

DEFAULT_CONFIG_YAML = textwrap.dedent("""\
# Duty rotation settings
lookback_days: 7
pad_labels_to_members: false
timezone: Asia/Tokyo
weekend_days: [5, 6]
random_seed: null
data_dir: data
""")


def ensure_assets_exist():
    os.makedirs("assets", exist_ok=True)
    if not os.path.exists(CONFIG_PATH):
        with open(CONFIG_PATH, "w", encoding="utf-8") as f:
            f.write(DEFAULT_CONFIG_YAML)


def parse_config_text(text: str) -> AppConfig:
    obj = yaml.safe_load(text) or {}
    if not isinstance(obj, dict):
        raise ValueError("Config file must be a mapping of setting -> value.")
    unknown = sorted(set(obj) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config keys: {unknown}")
    merged: Dict = dict(DEFAULT_CONFIG)
    merged.update(obj)
    return AppConfig(**merged)


def load_config_file(path: Optional[str] = None) -> AppConfig:
    """Defaults overlaid with the YAML file, if there is one."""
    path = path or CONFIG_PATH
    if not os.path.exists(path):
        return AppConfig(**DEFAULT_CONFIG)
    with open(path, "r", encoding="utf-8") as f:
        return parse_config_text(f.read())


# ===== Board theme (wrapped in <style>) =====
def ui_css() -> str:
    return """
<style>
:root{
  --bg:#faf7f2; --surface:#ffffff; --line:#e3d9cc;
  --text:#2b2118; --sub:#7a6a5a;
  --accent:#b5651d; --empty:#f1ede7;
  --radius:12px;
}
.block-container { padding-top: 1rem; max-width: 1100px; }
.cell{
  border:1px solid var(--line); border-radius:var(--radius);
  padding:10px 12px; text-align:center; background:#fff7ee; color:var(--text);
}
.cell.empty{ background:var(--empty); color:var(--sub); }
.cell.selected{ border-color:#3b82f6; background:#e0ecff; }
.small{ color:var(--sub); font-size:12px }
</style>
"""
