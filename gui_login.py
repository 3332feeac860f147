import customtkinter as ctk

from controllers import login

PRIMARY_COLOR = "#2B7A78"


class LoginFrame(ctk.CTkFrame):
    def __init__(self, master, api, session, runner, on_login):
        super().__init__(master)
        self.api = api
        self.session = session
        self.runner = runner
        self.on_login = on_login
        self.build_ui()

    def build_ui(self):
        ctk.CTkLabel(self, text="INVENTARIS HUB", font=("Arial", 20, "bold")).pack(pady=20)
        ctk.CTkLabel(self, text="Username:").pack(pady=5)
        self.ent_user = ctk.CTkEntry(self, placeholder_text="Enter username")
        self.ent_user.pack(pady=5)
        self.ent_user.focus()
        ctk.CTkLabel(self, text="Password:").pack(pady=5)
        self.ent_pass = ctk.CTkEntry(self, show="*", placeholder_text="Enter password")
        self.ent_pass.pack(pady=5)
        self.lbl_error = ctk.CTkLabel(self, text="", text_color="red", wraplength=300)
        self.lbl_error.pack(pady=5)
        self.btn_login = ctk.CTkButton(self, text="Login", command=self.try_login, fg_color=PRIMARY_COLOR)
        self.btn_login.pack(pady=10)
        self.ent_pass.bind('<Return>', lambda e: self.try_login())

    def try_login(self):
        if self.btn_login.cget("state") == "disabled":
            return
        username = self.ent_user.get()
        password = self.ent_pass.get()
        self.lbl_error.configure(text="")
        self.btn_login.configure(state="disabled", text="Logging in...")
        self.runner(lambda: login(self.api, self.session, username, password),
                    self.login_done, self.login_failed)

    def login_done(self, result):
        if not self.winfo_exists():
            return
        self.on_login(result)

    def login_failed(self, exc):
        if not self.winfo_exists():
            return
        self.btn_login.configure(state="normal", text="Login")
        self.ent_pass.delete(0, "end")
        self.lbl_error.configure(text=exc.message)
