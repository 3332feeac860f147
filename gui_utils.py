import queue
import threading
from tkinter import messagebox

from api import ApiError


def center_window(window, width, height):
    screen_width = window.winfo_screenwidth()
    screen_height = window.winfo_screenheight()
    x_coordinate = (screen_width - width) // 2
    y_coordinate = (screen_height - height) // 2
    window.geometry(f"{width}x{height}+{x_coordinate}+{y_coordinate}")


def show_popup_info(msg, title="Information", parent=None):
    messagebox.showinfo(title, msg, parent=parent)


def show_popup_question(msg, title="Confirm", parent=None):
    """
    Yes/No popup, returns True/False.
    """
    return messagebox.askyesno(title, msg, parent=parent)


class BackgroundRunner:
    """
    Runs API calls on a worker thread and delivers the outcome back on the
    Tk thread. Tk widgets must only be touched from the thread running
    mainloop, so workers push (callback, value) pairs into a queue that the
    window drains with after().
    """

    def __init__(self, widget, poll_ms=50):
        self.widget = widget
        self.poll_ms = poll_ms
        self.results = queue.Queue()
        self._poll()

    def __call__(self, task, on_success, on_error):
        def worker():
            try:
                result = task()
            except ApiError as e:
                self.results.put((on_error, e))
                return
            except Exception as e:
                print(f"[BackgroundRunner] Unexpected error: {e}")
                self.results.put((on_error, ApiError(f"Unexpected error: {e}")))
                return
            self.results.put((on_success, result))

        threading.Thread(target=worker, daemon=True).start()

    def _poll(self):
        try:
            while True:
                try:
                    callback, value = self.results.get_nowait()
                except queue.Empty:
                    break
                try:
                    callback(value)
                except Exception as e:
                    print(f"[BackgroundRunner] Callback failed: {e}")
        finally:
            if self.widget.winfo_exists():
                self.widget.after(self.poll_ms, self._poll)
