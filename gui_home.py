import customtkinter as ctk


class HomeFrame(ctk.CTkFrame):
    def __init__(self, master, on_products, on_users, on_logout):
        super().__init__(master)
        header = ctk.CTkFrame(self, height=54, fg_color="#205065")
        header.pack(fill="x", side="top")
        ctk.CTkLabel(header, text="INVENTARIS HUB", font=("Arial", 20, "bold"), text_color="white").pack(side="left", padx=20)
        ctk.CTkButton(header, text="Logout", command=on_logout, fg_color="#C0392B", hover_color="#922B21").pack(side="right", padx=20, pady=10)

        ctk.CTkLabel(self, text="Welcome to Inventaris Dashboard", font=("Arial", 24, "bold")).pack(pady=40)

        cards = ctk.CTkFrame(self, fg_color="transparent")
        cards.pack(pady=10)
        self._card(cards, "User Management", "Manage user accounts and roles", on_users).grid(row=0, column=0, padx=20)
        self._card(cards, "Product Management", "Manage inventory, products and categories", on_products).grid(row=0, column=1, padx=20)

    def _card(self, master, title, subtitle, command):
        card = ctk.CTkFrame(master, width=300, height=160)
        ctk.CTkButton(card, text=title, font=("Arial", 16, "bold"), width=260, height=60, command=command).pack(padx=20, pady=(25, 10))
        ctk.CTkLabel(card, text=subtitle, wraplength=260).pack(padx=20, pady=(0, 25))
        return card
