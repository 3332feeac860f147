"""
Screen state for the product and user management windows.

A ListController owns everything a management screen shows: the full list
from the server, the filtered list for the current search, the open modal
and its draft, and the busy flags. It knows nothing about widgets; the GUI
reads its attributes and re-renders whenever on_change fires.

API calls go through a runner(task, on_success, on_error). run_now calls
them inline; the GUI passes a BackgroundRunner so the window stays
responsive while a request is out.
"""

from dataclasses import replace

from api import ApiError, LoginFailed, Unauthorized
from models import ROLES, to_float, to_int
from search import DebouncedSearch, filter_records

LOADING = "loading"
READY = "ready"
ERROR = "error"

IDLE = "idle"
EDIT = "edit"
DELETE = "delete"


def run_now(task, on_success, on_error):
    try:
        result = task()
    except ApiError as e:
        on_error(e)
        return
    on_success(result)


# --------- ENTITY ADAPTERS ----------
class EntityAdapter:
    title = ""
    # (attribute, heading)
    columns = ()
    # (attribute, label, kind) where kind is text/int/float/choice/readonly
    form_fields = ()
    search_fields = ()
    choices = {}
    supports_image = False

    def key(self, record):
        return record.id

    def make_draft(self, record):
        return replace(record)

    def describe(self, record):
        return record.id

    def change(self, draft, field, value):
        kinds = {name: kind for name, _, kind in self.form_fields}
        kind = kinds.get(field)
        if kind is None:
            raise KeyError(f"Unknown field: {field}")
        if kind == "readonly":
            raise ValueError(f"Field {field} is read-only")
        if kind == "int":
            value = to_int(value)
        elif kind == "float":
            value = to_float(value)
        elif kind == "choice" and value not in self.choices[field]:
            raise ValueError(f"Invalid value for {field}: {value}")
        else:
            value = "" if value is None else str(value)
        setattr(draft, field, value)

    def list(self, api):
        raise NotImplementedError

    def update(self, api, draft, image=None):
        raise NotImplementedError

    def delete(self, api, record):
        raise NotImplementedError


class ProductAdapter(EntityAdapter):
    title = "Product Management"
    columns = (
        ("id", "ID"),
        ("name", "Product Name"),
        ("category", "Category"),
        ("quantity", "Quantity"),
        ("price", "Unit Price"),
        ("total_price", "Total Price"),
        ("date", "Date"),
        ("image", "Image"),
    )
    form_fields = (
        ("name", "Product Name", "text"),
        ("category", "Category", "text"),
        ("quantity", "Quantity", "int"),
        ("price", "Unit Price", "float"),
        ("total_price", "Total Price", "readonly"),
    )
    search_fields = ("name", "category")
    supports_image = True

    def describe(self, record):
        return record.name or record.id

    def change(self, draft, field, value):
        super().change(draft, field, value)
        if field in ("quantity", "price"):
            draft.recompute_total()

    def list(self, api):
        return api.list_products()

    def update(self, api, draft, image=None):
        return api.update_product(draft.id, draft.to_payload(), image)

    def delete(self, api, record):
        return api.delete_product(record.id)


class UserAdapter(EntityAdapter):
    title = "User Management"
    columns = (
        ("username", "Username"),
        ("email", "Email"),
        ("role", "Role"),
    )
    form_fields = (
        ("username", "Username", "text"),
        ("email", "Email", "text"),
        ("role", "Role", "choice"),
    )
    search_fields = ("username", "email")
    choices = {"role": ROLES}

    def describe(self, record):
        return record.username or record.id

    def list(self, api):
        return api.list_users()

    def update(self, api, draft, image=None):
        # the server only acknowledges, so what we sent is the new record
        api.update_user(draft.id, draft.to_payload())
        return draft

    def delete(self, api, record):
        return api.delete_user(record.id)


# --------- LIST CONTROLLER ----------
class ListController:
    def __init__(self, api, session, adapter, runner=run_now, scheduler=None,
                 debounce_ms=300, on_change=None, on_redirect=None):
        self.api = api
        self.session = session
        self.adapter = adapter
        self.runner = runner
        self.on_change = on_change
        self.on_redirect = on_redirect
        self.search = None
        if scheduler is not None:
            self.search = DebouncedSearch(scheduler, self._filter, self._apply_filter, debounce_ms)

        self.status = LOADING
        self.error = None
        self.records = []
        self.visible = []
        self.query = ""

        self.modal = IDLE
        self.target = None
        self.draft = None
        self.image = None
        self.modal_error = None

        self.is_loading = False
        self.is_updating = False
        self.is_deleting = False

        self._refetch_pending = False
        self._disposed = False
        # bumped whenever a modal opens or closes; late responses compare against it
        self._modal_seq = 0

    @property
    def busy(self):
        return self.is_updating or self.is_deleting

    def _changed(self):
        if self.on_change:
            self.on_change()

    def _redirect(self, expired):
        if self.on_redirect:
            self.on_redirect(expired)

    def dispose(self):
        self._disposed = True
        if self.search:
            self.search.cancel()
        self.on_change = None
        self.on_redirect = None

    # --------- LOADING ----------
    def mount(self):
        if not self.session.get_token():
            print(f"[{self.adapter.title}] No session token, back to login")
            self._redirect(expired=False)
            return False
        self.refresh()
        return True

    def refresh(self):
        if self.is_loading:
            self._refetch_pending = True
            return
        self.is_loading = True
        if self.status != READY:
            self.status = LOADING
        self._changed()
        self.runner(lambda: self.adapter.list(self.api), self._on_loaded, self._on_load_failed)

    def _on_loaded(self, records):
        self.is_loading = False
        self.records = list(records)
        self.visible = self._filter(self.query)
        self.status = READY
        self.error = None
        print(f"[{self.adapter.title}] Loaded {len(self.records)} records")
        self._changed()
        if self._refetch_pending:
            self._refetch_pending = False
            if not self._disposed:
                self.refresh()

    def _on_load_failed(self, exc):
        self.is_loading = False
        self._refetch_pending = False
        if isinstance(exc, Unauthorized):
            self._expire_session()
            return
        print(f"[{self.adapter.title}] Load failed: {exc.message}")
        self.status = ERROR
        self.error = exc.message
        self._changed()

    def _expire_session(self):
        print(f"[{self.adapter.title}] Session rejected by server, clearing token")
        self.session.clear()
        if self.search:
            self.search.cancel()
        self.records = []
        self.visible = []
        self.status = LOADING
        self._close_modal()
        self._changed()
        self._redirect(expired=True)

    # --------- SEARCH ----------
    def _filter(self, query):
        return filter_records(self.records, query, self.adapter.search_fields)

    def _apply_filter(self, query, result):
        self.query = query
        self.visible = result
        self._changed()

    def set_query(self, query):
        if self.search:
            self.search.submit(query)
        else:
            self._apply_filter(query, self._filter(query))

    # --------- MODALS ----------
    def _close_modal(self):
        self._modal_seq += 1
        self.modal = IDLE
        self.target = None
        self.draft = None
        self.image = None
        self.modal_error = None

    def _modal_is(self, seq, modal):
        return self._modal_seq == seq and self.modal == modal

    def _open_modal(self, modal, record):
        if self.status != READY or self.modal != IDLE:
            return False
        self._modal_seq += 1
        self.modal = modal
        self.target = record
        self.modal_error = None
        self.image = None
        self.draft = self.adapter.make_draft(record) if modal == EDIT else None
        self._changed()
        return True

    def open_edit(self, record):
        return self._open_modal(EDIT, record)

    def open_delete(self, record):
        return self._open_modal(DELETE, record)

    def cancel(self):
        if self.modal == IDLE:
            return
        self._close_modal()
        self._changed()

    def change_draft(self, field, value):
        if self.modal != EDIT:
            return
        self.adapter.change(self.draft, field, value)
        self._changed()

    def attach_image(self, filename, data):
        if self.modal != EDIT:
            return
        if not self.adapter.supports_image:
            raise ValueError(f"{self.adapter.title} does not take images")
        self.image = (filename, data)
        self._changed()

    # --------- MUTATIONS ----------
    def _patch(self, record):
        key = self.adapter.key(record)
        self.records = [record if self.adapter.key(r) == key else r for r in self.records]
        self.visible = [record if self.adapter.key(r) == key else r for r in self.visible]

    def submit_edit(self):
        if self.modal != EDIT or self.busy:
            return False
        seq = self._modal_seq
        draft = self.adapter.make_draft(self.draft)
        image = self.image
        self.is_updating = True
        self.modal_error = None
        self._changed()
        self.runner(lambda: self.adapter.update(self.api, draft, image),
                    lambda record: self._on_updated(seq, record),
                    lambda exc: self._on_update_failed(seq, exc))
        return True

    def _on_updated(self, seq, record):
        self.is_updating = False
        self._patch(record)
        if self._modal_is(seq, EDIT):
            self._close_modal()
        self._changed()
        if not self._disposed:
            self.refresh()

    def _on_update_failed(self, seq, exc):
        self.is_updating = False
        if isinstance(exc, Unauthorized):
            self._expire_session()
            return
        print(f"[{self.adapter.title}] Update failed: {exc.message}")
        if self._modal_is(seq, EDIT):
            self.modal_error = exc.message
        self._changed()

    def confirm_delete(self):
        if self.modal != DELETE or self.busy:
            return False
        seq = self._modal_seq
        target = self.target
        self.is_deleting = True
        self.modal_error = None
        self._changed()
        self.runner(lambda: self.adapter.delete(self.api, target),
                    lambda _: self._on_deleted(seq),
                    lambda exc: self._on_delete_failed(seq, exc))
        return True

    def _on_deleted(self, seq):
        self.is_deleting = False
        if self._modal_is(seq, DELETE):
            self._close_modal()
        self._changed()
        if not self._disposed:
            self.refresh()

    def _on_delete_failed(self, seq, exc):
        self.is_deleting = False
        if isinstance(exc, Unauthorized):
            self._expire_session()
            return
        print(f"[{self.adapter.title}] Delete failed: {exc.message}")
        if self._modal_is(seq, DELETE):
            self.modal_error = exc.message
        self._changed()


# --------- LOGIN / LOGOUT ----------
def login(api, session, username, password):
    username = (username or "").strip()
    if not username or not password:
        raise LoginFailed("Username and password are required!")
    result = api.login(username, password)
    session.set_token(result.token)
    print(f"[login] Logged in as {username} (role: {result.role or '-'})")
    return result


def logout(api, session):
    if session.get_token():
        try:
            api.logout()
        except ApiError as e:
            print(f"[logout] Server logout failed, clearing local session anyway: {e.message}")
    session.clear()
