"""Test doubles shared by the test modules."""

from unittest.mock import MagicMock

from controllers import run_now


class FakeScheduler:
    """Stands in for a Tk widget's after()/after_cancel() with a manual clock."""

    def __init__(self, honour_cancel=True):
        self.now = 0
        self.timers = {}
        self.next_id = 0
        self.honour_cancel = honour_cancel

    def after(self, ms, callback):
        self.next_id += 1
        handle = f"after#{self.next_id}"
        self.timers[handle] = (self.now + ms, callback)
        return handle

    def after_cancel(self, handle):
        if self.honour_cancel:
            self.timers.pop(handle, None)

    def advance(self, ms):
        self.now += ms
        due = sorted((when, handle) for handle, (when, _) in self.timers.items() if when <= self.now)
        for _, handle in due:
            _, callback = self.timers.pop(handle)
            callback()


class MemorySession:
    def __init__(self, token=None):
        self.token = token

    def get_token(self):
        return self.token

    def set_token(self, token):
        self.token = token

    def clear(self):
        self.token = None


class DeferredRunner:
    """Holds tasks until the test resolves them, to model slow responses."""

    def __init__(self):
        self.pending = []

    def __call__(self, task, on_success, on_error):
        self.pending.append((task, on_success, on_error))

    def resolve(self, index=0):
        task, on_success, on_error = self.pending.pop(index)
        run_now(task, on_success, on_error)


def fake_response(status_code=200, body=None, invalid_json=False):
    response = MagicMock()
    response.status_code = status_code
    if invalid_json:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response
