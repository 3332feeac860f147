import json
import os

REQUIRED_KEYS = ['API_URL']


def load_config(config_file='config.json'):
    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Config file {config_file} not found! Make sure it exists in: {os.getcwd()}")
    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        with open(config_file, 'r', encoding='utf-8') as f:
            lines = f.readlines()
            error_line = lines[e.lineno - 1] if e.lineno <= len(lines) else "Unknown"
        raise ValueError(f"Config file {config_file} is invalid: {str(e)}\nLine {e.lineno}: {error_line.strip()}")

    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_file} must contain a JSON object")

    missing_keys = [key for key in REQUIRED_KEYS if key not in config]
    if missing_keys:
        raise KeyError(f"Missing keys in {config_file}: {', '.join(missing_keys)}")

    config['API_URL'] = config['API_URL'].rstrip('/')
    config.setdefault('SESSION_FILE', 'session.json')
    config.setdefault('REQUEST_TIMEOUT', 10)
    config.setdefault('VERIFY_TLS', True)
    config.setdefault('SEARCH_DEBOUNCE_MS', 300)
    config.setdefault('IMAGE_BASE_URL', config['API_URL'])
    config.setdefault('APPEARANCE_MODE', 'dark')
    config.setdefault('COLOR_THEME', 'green')
    return config
