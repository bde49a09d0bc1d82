import customtkinter as ctk

from services.sync_service import SyncService
from utils.constants import APP_NAME
from utils.errors import FinanceTrackerError


class LoginDialog(ctk.CTk):
    """Standalone sign-in / register window shown before the main window.

    After mainloop() returns, .token holds the bearer token (None if the
    user closed the window) and .registered tells whether a new account
    was created.
    """

    def __init__(self, sync_service: SyncService, last_email: str = "", **kwargs):
        super().__init__(**kwargs)
        self._sync = sync_service
        self.token: str | None = None
        self.email: str = last_email
        self.registered = False

        self.title(f"{APP_NAME} - Sign in")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._mode_var = ctk.StringVar(value="Sign in")
        ctk.CTkSegmentedButton(
            self, values=["Sign in", "Register"], variable=self._mode_var,
            command=self._on_mode_change,
        ).grid(row=0, column=0, columnspan=2, padx=16, pady=(16, 8), sticky="ew")

        self._name_label = ctk.CTkLabel(self, text="Name:")
        self._name_var = ctk.StringVar()
        self._name_entry = ctk.CTkEntry(self, textvariable=self._name_var, width=240)

        ctk.CTkLabel(self, text="Email:").grid(row=2, column=0, padx=(16, 8), pady=4, sticky="e")
        self._email_var = ctk.StringVar(value=last_email)
        ctk.CTkEntry(self, textvariable=self._email_var, width=240).grid(
            row=2, column=1, padx=(0, 16), pady=4, sticky="ew"
        )

        ctk.CTkLabel(self, text="Password:").grid(row=3, column=0, padx=(16, 8), pady=4, sticky="e")
        self._password_var = ctk.StringVar()
        password = ctk.CTkEntry(self, textvariable=self._password_var, show="•", width=240)
        password.grid(row=3, column=1, padx=(0, 16), pady=4, sticky="ew")
        password.bind("<Return>", lambda _e: self._on_submit())

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=320, anchor="w",
        ).grid(row=4, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        self._submit_btn = ctk.CTkButton(self, text="Sign in", command=self._on_submit)
        self._submit_btn.grid(row=5, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")

    def _on_mode_change(self, mode: str):
        if mode == "Register":
            self._name_label.grid(row=1, column=0, padx=(16, 8), pady=4, sticky="e")
            self._name_entry.grid(row=1, column=1, padx=(0, 16), pady=4, sticky="ew")
        else:
            self._name_label.grid_forget()
            self._name_entry.grid_forget()
        self._submit_btn.configure(text=mode)
        self._error_var.set("")

    def _on_submit(self):
        email = self._email_var.get()
        password = self._password_var.get()
        try:
            if self._mode_var.get() == "Register":
                token, user = self._sync.register(self._name_var.get(), email, password)
                self.registered = True
            else:
                token, user = self._sync.login(email, password)
        except FinanceTrackerError as e:
            self._error_var.set(str(e))
            return
        self.token = token
        self.email = user.email
        self.destroy()
