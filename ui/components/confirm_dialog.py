import customtkinter as ctk

_DANGER = ("#F44336", "#D32F2F")


class ConfirmDialog(ctk.CTkToplevel):
    """Modal yes/no question. Blocks until answered; read the answer from .result."""

    def __init__(
        self,
        master,
        title: str,
        message: str,
        confirm_text: str = "Delete",
        danger: bool = True,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self.title(title)
        self.result = False
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, wraplength=360, justify="left", padx=20, pady=16
        ).grid(row=0, column=0, sticky="ew")

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=1, column=0, pady=(0, 16), padx=20, sticky="e")
        ctk.CTkButton(
            buttons, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda: self._answer(False),
        ).pack(side="left", padx=(0, 8))
        confirm_colors = {"fg_color": _DANGER[0], "hover_color": _DANGER[1]} if danger else {}
        ctk.CTkButton(
            buttons, text=confirm_text, width=90,
            command=lambda: self._answer(True),
            **confirm_colors,
        ).pack(side="left")

        self.bind("<Escape>", lambda _e: self._answer(False))
        self.transient(master)
        self.grab_set()
        center_on_master(self)
        self.wait_window()

    def _answer(self, value: bool):
        self.result = value
        self.destroy()


def center_on_master(window: ctk.CTkToplevel):
    """Place a dialog over the middle of its master window."""
    window.update_idletasks()
    mx = window.master.winfo_x() + window.master.winfo_width() // 2
    my = window.master.winfo_y() + window.master.winfo_height() // 2
    w, h = window.winfo_reqwidth(), window.winfo_reqheight()
    window.geometry(f"+{mx - w // 2}+{my - h // 2}")
