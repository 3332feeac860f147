import json
import os


class SessionStore:
    """
    Holds the bearer token in a small JSON file so it survives restarts.
    Only login, logout and 401 handling should write to it.
    """

    def __init__(self, path='session.json', key='token'):
        self.path = path
        self.key = key

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            print(f"[SessionStore] Cannot read {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data):
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

    def get_token(self):
        token = self._read().get(self.key)
        return token or None

    def set_token(self, token):
        if not token:
            raise ValueError("Token must be a non-empty string")
        data = self._read()
        data[self.key] = token
        self._write(data)
        print("[SessionStore] Token saved")

    def clear(self):
        data = self._read()
        if self.key not in data:
            return
        del data[self.key]
        self._write(data)
        print("[SessionStore] Token cleared")
