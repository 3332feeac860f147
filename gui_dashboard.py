import os
import tkinter as tk
from tkinter import filedialog, ttk

import customtkinter as ctk

from controllers import DELETE, EDIT, ERROR, IDLE, LOADING

PRIMARY_COLOR = "#2B7A78"
DANGER_COLOR = "#C0392B"


def format_cell(field, value, image_base_url=""):
    if field in ("price", "total_price"):
        return f"Rp {float(value):,.2f}"
    if field == "date":
        return value[:10]
    if field == "image" and value and not value.startswith(("http://", "https://")):
        return f"{image_base_url}{value}"
    return "" if value is None else str(value)


class EntityDashboard(ctk.CTkFrame):
    """
    Table + search + edit/delete modals for one ListController. Everything on
    screen is redrawn from controller state in render(); widgets only send
    intents back to the controller.
    """

    def __init__(self, master, controller, on_back, image_base_url=""):
        super().__init__(master)
        self.controller = controller
        self.adapter = controller.adapter
        self.image_base_url = image_base_url
        self.on_back = on_back
        self.modal_win = None
        self.modal_kind = IDLE
        # tree iid -> record; ids from the server are not trusted to be unique
        self.row_records = {}
        self.build_ui()

    def build_ui(self):
        header = ctk.CTkFrame(self, height=54, fg_color="#205065")
        header.pack(fill="x", side="top")
        ctk.CTkLabel(header, text=self.adapter.title, font=("Arial", 20, "bold"), text_color="white").pack(side="left", padx=20)
        ctk.CTkButton(header, text="Back to Home", command=self.on_back).pack(side="right", padx=20, pady=10)
        ctk.CTkButton(header, text="Refresh", command=self.controller.refresh).pack(side="right", pady=10)

        self.search_var = tk.StringVar()
        search_entry = ctk.CTkEntry(self, textvariable=self.search_var, placeholder_text="Search...", width=400)
        search_entry.pack(padx=20, pady=10, anchor="w")
        self.search_var.trace_add("write", lambda *args: self.controller.set_query(self.search_var.get()))

        self.lbl_status = ctk.CTkLabel(self, text="", font=("Arial", 14))
        self.lbl_status.pack(pady=5)

        self.table_frame = ctk.CTkFrame(self)
        cols = [name for name, _ in self.adapter.columns]
        self.tree = ttk.Treeview(self.table_frame, columns=cols, show="headings", selectmode="browse")
        for name, heading in self.adapter.columns:
            self.tree.heading(name, text=heading)
            self.tree.column(name, width=220 if name in ("id", "image", "email") else 120)
        scrollbar = ttk.Scrollbar(self.table_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=scrollbar.set)
        self.tree.pack(side="left", fill="both", expand=True)
        scrollbar.pack(side="right", fill="y")
        self.tree.bind("<Double-1>", lambda e: self.edit_selected())

        self.actions = ctk.CTkFrame(self, fg_color="transparent")
        self.btn_edit = ctk.CTkButton(self.actions, text="Edit", command=self.edit_selected, fg_color=PRIMARY_COLOR)
        self.btn_edit.pack(side="left", padx=5)
        self.btn_delete = ctk.CTkButton(self.actions, text="Delete", command=self.delete_selected, fg_color=DANGER_COLOR)
        self.btn_delete.pack(side="left", padx=5)

    def selected_record(self):
        return self.row_records.get(self.tree.focus())

    def edit_selected(self):
        record = self.selected_record()
        if record is not None:
            self.controller.open_edit(record)

    def delete_selected(self):
        record = self.selected_record()
        if record is not None:
            self.controller.open_delete(record)

    # --------- RENDER ----------
    def render(self):
        if not self.winfo_exists():
            return
        c = self.controller
        if c.status == LOADING:
            self.lbl_status.configure(text="Loading data...", text_color=("black", "white"))
            self.table_frame.pack_forget()
            self.actions.pack_forget()
        elif c.status == ERROR:
            self.lbl_status.configure(text=c.error, text_color="red")
            self.table_frame.pack_forget()
            self.actions.pack_forget()
        else:
            text = "" if c.visible else "No data available"
            if c.is_loading:
                text = "Refreshing..."
            self.lbl_status.configure(text=text, text_color=("black", "white"))
            self.table_frame.pack(fill="both", expand=True, padx=20, pady=5)
            self.actions.pack(pady=10)
            self.fill_table()
        self.sync_modal()

    def fill_table(self):
        selected = self.selected_record()
        selected_key = self.adapter.key(selected) if selected is not None else None
        self.tree.delete(*self.tree.get_children())
        self.row_records = {}
        reselect = None
        for record in self.controller.visible:
            values = [format_cell(name, getattr(record, name), self.image_base_url) for name, _ in self.adapter.columns]
            iid = self.tree.insert("", "end", values=values)
            self.row_records[iid] = record
            if reselect is None and selected_key is not None and self.adapter.key(record) == selected_key:
                reselect = iid
        if reselect is not None:
            self.tree.selection_set(reselect)
            self.tree.focus(reselect)

    def sync_modal(self):
        c = self.controller
        if self.modal_win is not None and (c.modal != self.modal_kind or not self.modal_win.winfo_exists()):
            if self.modal_win.winfo_exists():
                self.modal_win.destroy()
            self.modal_win = None
            self.modal_kind = IDLE
        if self.modal_win is None and c.modal == EDIT:
            self.modal_win = EditModal(self, c)
            self.modal_kind = EDIT
        elif self.modal_win is None and c.modal == DELETE:
            self.modal_win = DeleteModal(self, c)
            self.modal_kind = DELETE
        if self.modal_win is not None:
            self.modal_win.render()

    def destroy(self):
        if self.modal_win is not None and self.modal_win.winfo_exists():
            self.modal_win.destroy()
        super().destroy()


class EditModal(ctk.CTkToplevel):
    def __init__(self, master, controller):
        super().__init__(master)
        self.controller = controller
        self.adapter = controller.adapter
        self.title(f"Edit - {self.adapter.describe(controller.target)}")
        self.geometry("420x480")
        self.resizable(False, False)
        self.attributes('-topmost', True)
        self.protocol("WM_DELETE_WINDOW", controller.cancel)
        self.bind("<Escape>", lambda e: controller.cancel())
        self.readonly_labels = {}
        self.build_ui()
        self.transient(master)
        self.after(100, lambda: self.winfo_exists() and self.grab_set())

    def build_ui(self):
        draft = self.controller.draft
        form = ctk.CTkFrame(self)
        form.pack(fill="both", expand=True, padx=20, pady=20)
        for name, label, kind in self.adapter.form_fields:
            ctk.CTkLabel(form, text=label).pack(anchor="w")
            value = getattr(draft, name)
            if kind == "readonly":
                lbl = ctk.CTkLabel(form, text=format_cell(name, value), font=("Arial", 14, "bold"))
                lbl.pack(anchor="w", pady=(0, 8))
                self.readonly_labels[name] = lbl
            elif kind == "choice":
                menu = ctk.CTkOptionMenu(form, values=list(self.adapter.choices[name]),
                                         command=lambda v, n=name: self.controller.change_draft(n, v))
                menu.set(value)
                menu.pack(fill="x", pady=(0, 8))
            else:
                var = tk.StringVar(value=str(value))
                ctk.CTkEntry(form, textvariable=var).pack(fill="x", pady=(0, 8))
                var.trace_add("write", lambda *args, n=name, v=var: self.controller.change_draft(n, v.get()))

        if self.adapter.supports_image:
            row = ctk.CTkFrame(form, fg_color="transparent")
            row.pack(fill="x", pady=(0, 8))
            ctk.CTkButton(row, text="Choose Image", command=self.choose_image, width=120).pack(side="left")
            self.lbl_image = ctk.CTkLabel(row, text="")
            self.lbl_image.pack(side="left", padx=10)

        self.lbl_error = ctk.CTkLabel(form, text="", text_color="red", wraplength=360)
        self.lbl_error.pack(pady=5)
        buttons = ctk.CTkFrame(form, fg_color="transparent")
        buttons.pack(pady=10)
        self.btn_save = ctk.CTkButton(buttons, text="Save Changes", command=self.controller.submit_edit, fg_color=PRIMARY_COLOR)
        self.btn_save.pack(side="left", padx=5)
        ctk.CTkButton(buttons, text="Cancel", command=self.controller.cancel, fg_color="gray").pack(side="left", padx=5)

    def choose_image(self):
        path = filedialog.askopenfilename(parent=self, filetypes=[("Images", "*.png *.jpg *.jpeg *.gif *.webp")])
        if not path:
            return
        with open(path, "rb") as f:
            data = f.read()
        self.controller.attach_image(os.path.basename(path), data)

    def render(self):
        c = self.controller
        for name, lbl in self.readonly_labels.items():
            lbl.configure(text=format_cell(name, getattr(c.draft, name)))
        if self.adapter.supports_image:
            self.lbl_image.configure(text=c.image[0] if c.image else "")
        self.lbl_error.configure(text=c.modal_error or "")
        if c.busy:
            self.btn_save.configure(state="disabled", text="Saving...")
        else:
            self.btn_save.configure(state="normal", text="Save Changes")


class DeleteModal(ctk.CTkToplevel):
    def __init__(self, master, controller):
        super().__init__(master)
        self.controller = controller
        self.title("Confirm Delete")
        self.geometry("380x200")
        self.resizable(False, False)
        self.attributes('-topmost', True)
        self.protocol("WM_DELETE_WINDOW", controller.cancel)
        self.bind("<Escape>", lambda e: controller.cancel())
        name = controller.adapter.describe(controller.target)
        ctk.CTkLabel(self, text=f"Delete '{name}'? This action cannot be undone.", wraplength=340).pack(pady=20, padx=20)
        self.lbl_error = ctk.CTkLabel(self, text="", text_color="red", wraplength=340)
        self.lbl_error.pack()
        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.pack(pady=10)
        self.btn_delete = ctk.CTkButton(buttons, text="Delete", command=controller.confirm_delete, fg_color=DANGER_COLOR)
        self.btn_delete.pack(side="left", padx=5)
        ctk.CTkButton(buttons, text="Cancel", command=controller.cancel, fg_color="gray").pack(side="left", padx=5)
        self.transient(master)
        self.after(100, lambda: self.winfo_exists() and self.grab_set())

    def render(self):
        c = self.controller
        self.lbl_error.configure(text=c.modal_error or "")
        if c.busy:
            self.btn_delete.configure(state="disabled", text="Deleting...")
        else:
            self.btn_delete.configure(state="normal", text="Delete")
