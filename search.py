def field_text(record, name):
    if isinstance(record, dict):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    return "" if value is None else str(value).lower()


def filter_records(records, query, fields):
    """
    Return the records where the query appears, case-insensitively, in any
    of the given fields. Empty query keeps everything. Order is preserved.
    """
    needle = (query or "").lower()
    if not needle:
        return list(records)
    return [r for r in records if any(needle in field_text(r, name) for name in fields)]


class DebouncedSearch:
    """
    Runs compute(query) once the input has been quiet for delay_ms, then
    hands the result to apply(query, result).

    scheduler is anything with tkinter's after()/after_cancel(), usually
    the window itself. Every submit bumps a sequence number and only the
    newest one may reach apply(), so a timer that still fires after being
    superseded is dropped.
    """

    def __init__(self, scheduler, compute, apply, delay_ms=300):
        self.scheduler = scheduler
        self.compute = compute
        self.apply = apply
        self.delay_ms = delay_ms
        self.seq = 0
        self._pending = None

    def submit(self, query):
        self.seq += 1
        seq = self.seq
        self._cancel_pending()
        self._pending = self.scheduler.after(self.delay_ms, lambda: self._fire(seq, query))
        return seq

    def _fire(self, seq, query):
        if seq != self.seq:
            print(f"[DebouncedSearch] Dropping stale query #{seq} ({query!r})")
            return
        self._pending = None
        result = self.compute(query)
        # compute may have triggered a newer submit
        if seq != self.seq:
            print(f"[DebouncedSearch] Dropping stale result #{seq} ({query!r})")
            return
        self.apply(query, result)

    def _cancel_pending(self):
        if self._pending is not None:
            self.scheduler.after_cancel(self._pending)
            self._pending = None

    def cancel(self):
        self.seq += 1
        self._cancel_pending()
