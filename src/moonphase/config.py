import json
import logging
from pathlib import Path
from typing import Optional, Tuple

from appdirs import user_config_dir

from .paths import APP_ID, APP_AUTHOR


log = logging.getLogger("moonphase.config")


def config_file() -> Path:
    config_dir = Path(user_config_dir(APP_ID, APP_AUTHOR))
    return config_dir / "config.json"


def load_last_location(path: Optional[Path] = None) -> Optional[Tuple[float, float]]:
    path = path or config_file()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        loc = data.get("location")
        if loc is None:
            return None
        lat, lon = loc
        return (float(lat), float(lon))
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
        log.warning("ignoring malformed config file %s", path)
        return None


def save_last_location(location: Tuple[float, float], path: Optional[Path] = None) -> None:
    path = path or config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    lat, lon = location
    path.write_text(json.dumps({"location": [lat, lon]}, ensure_ascii=False), encoding="utf-8")
