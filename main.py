import customtkinter as ctk

from api import InventoryApi
from config import load_config
from controllers import ListController, ProductAdapter, UserAdapter, logout
from gui_dashboard import EntityDashboard
from gui_home import HomeFrame
from gui_login import LoginFrame
from gui_utils import BackgroundRunner, center_window, show_popup_info, show_popup_question
from session import SessionStore


class App(ctk.CTk):
    def __init__(self, config):
        super().__init__()
        self.config_data = config
        self.title("Inventaris Hub")
        center_window(self, 1200, 760)
        self.session = SessionStore(config['SESSION_FILE'])
        self.api = InventoryApi(config['API_URL'], self.session,
                                timeout=config['REQUEST_TIMEOUT'], verify=config['VERIFY_TLS'])
        self.runner = BackgroundRunner(self)
        self.screen = None
        self.controller = None
        if self.session.get_token():
            self.show_home()
        else:
            self.show_login()

    def _swap(self, frame):
        if self.controller is not None:
            self.controller.dispose()
            self.controller = None
        if self.screen is not None:
            self.screen.destroy()
        self.screen = frame
        self.screen.pack(fill="both", expand=True)

    def show_login(self):
        self._swap(LoginFrame(self, self.api, self.session, self.runner, lambda result: self.show_home()))

    def show_home(self):
        if not self.session.get_token():
            self.show_login()
            return
        self._swap(HomeFrame(self, on_products=self.show_products, on_users=self.show_users, on_logout=self.do_logout))

    def show_products(self):
        self.show_entity(ProductAdapter())

    def show_users(self):
        self.show_entity(UserAdapter())

    def show_entity(self, adapter):
        controller = ListController(self.api, self.session, adapter, runner=self.runner, scheduler=self,
                                    debounce_ms=self.config_data['SEARCH_DEBOUNCE_MS'])
        dashboard = EntityDashboard(self, controller, on_back=self.show_home,
                                    image_base_url=self.config_data['IMAGE_BASE_URL'])
        self._swap(dashboard)
        self.controller = controller
        controller.on_change = dashboard.render
        controller.on_redirect = self.redirect_to_login
        controller.mount()

    def redirect_to_login(self, expired):
        # let the current callback finish before tearing the screen down
        self.after(0, lambda: self._back_to_login(expired))

    def _back_to_login(self, expired):
        self.show_login()
        if expired:
            show_popup_info("Your session is invalid or has expired. Please log in again.", title="Session", parent=self)

    def do_logout(self):
        if not show_popup_question("Are you sure you want to log out?", title="Logout", parent=self):
            return
        self.runner(lambda: logout(self.api, self.session), lambda _: self.show_login(), lambda e: self.show_login())


def main():
    try:
        config = load_config()
    except (FileNotFoundError, ValueError, KeyError) as e:
        raise SystemExit(f"Configuration error: {str(e)}")
    ctk.set_appearance_mode(config['APPEARANCE_MODE'])
    ctk.set_default_color_theme(config['COLOR_THEME'])
    app = App(config)
    app.mainloop()


if __name__ == "__main__":
    main()
